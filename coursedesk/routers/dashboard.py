from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from coursedesk.core.deps import get_db, get_local_tz, get_now
from coursedesk.models.course import Course
from coursedesk.models.user import User
from coursedesk.schemas.dashboard import DashboardStatsRead
from coursedesk.services.records import student_assignments
from coursedesk.services.stats import aggregate, filter_by_course, format_average

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard/stats", response_model=DashboardStatsRead)
def dashboard_stats(
    student_id: int = Query(...),
    course_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    tz: ZoneInfo = Depends(get_local_tz),
):
    if not db.query(User.id).filter(User.id == student_id).first():
        raise HTTPException(status_code=404, detail="User not found")

    calculation = "simple"
    if course_id is not None:
        course = db.query(Course).filter(Course.id == course_id).first()
        if not course:
            raise HTTPException(status_code=404, detail="Course not found")
        calculation = course.grade_calculation

    # filtering happens before aggregation
    records = filter_by_course(student_assignments(db, student_id), course_id)
    stats = aggregate(records, now, tz, calculation)

    return DashboardStatsRead(
        pending_count=stats.pending_count,
        upcoming_count=stats.upcoming_count,
        average_grade=stats.average_grade,
        graded_count=stats.graded_count,
        total_count=stats.total_count,
        average_display=format_average(stats.average_grade),
        graded_display=f"{stats.graded_count}/{stats.total_count}",
    )
