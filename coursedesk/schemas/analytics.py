from pydantic import BaseModel


class GradeBucket(BaseModel):
    grade: str
    range: str
    count: int


class GradeDistributionRead(BaseModel):
    assignment_id: int
    assignment_title: str
    graded: int
    buckets: list[GradeBucket]
    average: float | None = None
    median: float | None = None
    std_dev: float | None = None
