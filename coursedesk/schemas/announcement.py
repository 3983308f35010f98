from datetime import datetime

from pydantic import BaseModel, Field


class AnnouncementCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    posted_by: int
    is_pinned: bool = False


class AnnouncementRead(BaseModel):
    id: int
    course_id: int
    title: str
    content: str
    posted_by: int
    author_name: str | None = None
    is_pinned: bool
    created_at: datetime

    class Config:
        from_attributes = True
