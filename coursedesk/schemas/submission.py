from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from coursedesk.schemas.assignment import SubmissionStatus


class SubmissionCreate(BaseModel):
    student_id: int
    file_name: str = Field(min_length=1, max_length=255)
    file_url: Optional[str] = Field(default=None, max_length=500)


class SubmissionRead(BaseModel):
    id: int
    assignment_id: int
    student_id: int
    file_name: str
    file_url: Optional[str]
    submitted_at: datetime
    is_late: bool

    class Config:
        from_attributes = True


class GradeUpdate(BaseModel):
    points_earned: float = Field(ge=0)
    feedback: Optional[str] = None
    graded_by: Optional[int] = None


class GradeRead(BaseModel):
    submission_id: int
    points_earned: Optional[float]
    feedback: Optional[str]
    graded_by: Optional[int]
    graded_at: datetime

    class Config:
        from_attributes = True


class RosterEntry(BaseModel):
    """A student row in the grading interface."""

    id: int
    name: str
    submission_id: Optional[int] = None
    submission_status: SubmissionStatus = "not-submitted"
    submitted_at: Optional[datetime] = None
    is_late: bool = False
    file: Optional[str] = None
    earned_points: Optional[float] = None
    feedback: Optional[str] = None

    @property
    def initials(self) -> str:
        return "".join(part[0] for part in self.name.split() if part)

    @model_validator(mode="after")
    def _check_file(self):
        if self.file is None:
            if self.submission_status != "not-submitted":
                raise ValueError("a submission without a file cannot be submitted or graded")
            if self.earned_points is not None:
                raise ValueError("cannot grade a submission without a file")
        if self.earned_points is not None and self.submission_status != "graded":
            raise ValueError("earned_points requires submission_status 'graded'")
        return self
