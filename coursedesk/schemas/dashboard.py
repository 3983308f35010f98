from pydantic import BaseModel


class DashboardStatsRead(BaseModel):
    pending_count: int
    upcoming_count: int
    average_grade: float | None
    graded_count: int
    total_count: int

    # display strings for the stat cards
    average_display: str
    graded_display: str
