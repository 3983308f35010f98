from typing import Literal

from pydantic import BaseModel, Field

from coursedesk.schemas.assignment import AssignmentView

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class CourseCreate(BaseModel):
    code: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=255)
    semester: str = Field(min_length=1, max_length=20)
    color: str | None = Field(default=None, pattern=HEX_COLOR)
    instructor_id: int | None = None


class CourseRead(BaseModel):
    id: int
    code: str
    name: str
    semester: str
    color: str | None = None
    instructor_id: int | None = None
    invite_code: str

    class Config:
        from_attributes = True


class CourseSettingsUpdate(BaseModel):
    code: str | None = Field(default=None, min_length=1, max_length=20)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    semester: str | None = Field(default=None, min_length=1, max_length=20)
    color: str | None = Field(default=None, pattern=HEX_COLOR)
    enrollment_limit: int | None = Field(default=None, ge=1)
    allow_self_enrollment: bool | None = None
    late_policy: Literal["deduct", "accept", "reject"] | None = None
    late_penalty: int | None = Field(default=None, ge=0, le=100)
    grade_calculation: Literal["simple", "weighted"] | None = None
    show_grades: bool | None = None
    hide_student_names: bool | None = None


class CourseSettingsRead(CourseRead):
    enrollment_limit: int | None = None
    allow_self_enrollment: bool
    late_policy: str
    late_penalty: int
    grade_calculation: str
    show_grades: bool
    hide_student_names: bool


class CourseCard(BaseModel):
    id: int
    code: str
    name: str
    semester: str
    color: str | None = None
    assignments_due: int
    student_count: int
    grade: float | None = None  # None: not yet computed
    upcoming_assignments: list[AssignmentView] = []
