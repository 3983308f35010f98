from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class EnrollmentCreate(BaseModel):
    user_id: int
    invite_code: str = Field(min_length=1, max_length=8)
    role: Literal["student", "ta", "instructor"] = "student"


class EnrollmentOut(BaseModel):
    id: int
    user_id: int
    course_id: int
    role: str
    created_at: datetime

    class Config:
        from_attributes = True
