from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from coursedesk.services.due_dates import Proximity

SubmissionStatus = Literal["not-submitted", "submitted", "graded"]


class AssignmentRecord(BaseModel):
    """One assignment as seen by one student: the input of the dashboard rules."""

    id: int
    course_id: int
    course_code: str
    course_color: Optional[str] = None
    name: str
    due_date: datetime
    status: SubmissionStatus = "not-submitted"
    points: float = Field(ge=0)
    earned_points: Optional[float] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _check_earned_points(self):
        if self.status == "graded" and self.earned_points is None:
            raise ValueError("graded assignment requires earned_points")
        if self.status != "graded" and self.earned_points is not None:
            raise ValueError(f"earned_points is only allowed on graded assignments (status={self.status})")
        if self.earned_points is not None and self.earned_points > self.points:
            raise ValueError(
                f"earned_points ({self.earned_points}) cannot exceed points ({self.points})"
            )
        return self


class AssignmentView(AssignmentRecord):
    # derived per read, never stored
    is_overdue: bool
    due_proximity: Proximity
    due_label: str


class AssignmentCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    due_date: datetime
    points_possible: float = Field(default=100, ge=0)
    allow_late: bool = True


class AssignmentRead(BaseModel):
    id: int
    course_id: int
    title: str
    description: Optional[str]
    due_date: datetime
    points_possible: float
    allow_late: bool
    created_at: datetime

    class Config:
        from_attributes = True
