import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from coursedesk.core.deps import get_db, get_local_tz, get_now
from coursedesk.models.assignment import Assignment
from coursedesk.models.course import Course
from coursedesk.models.user import User
from coursedesk.schemas.assignment import AssignmentCreate, AssignmentRead, AssignmentView
from coursedesk.services.records import as_utc, student_assignments, to_view

logger = logging.getLogger(__name__)

router = APIRouter()


def _ensure_course_exists(db: Session, course_id: int) -> Course:
    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


@router.get("/assignments", response_model=list[AssignmentView])
def list_assignments(
    student_id: int = Query(...),
    course_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    tz: ZoneInfo = Depends(get_local_tz),
):
    if not db.query(User.id).filter(User.id == student_id).first():
        raise HTTPException(status_code=404, detail="User not found")
    if course_id is not None:
        _ensure_course_exists(db, course_id)

    # already ordered by due date, then id
    return [to_view(r, now, tz) for r in student_assignments(db, student_id, course_id)]


@router.get("/assignments/{assignment_id}", response_model=AssignmentRead)
def get_assignment(assignment_id: int, db: Session = Depends(get_db)):
    a = db.query(Assignment).filter(Assignment.id == assignment_id).first()
    if not a:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return a


@router.post(
    "/courses/{course_id}/assignments",
    response_model=AssignmentRead,
    status_code=status.HTTP_201_CREATED,
)
def create_assignment(
    course_id: int,
    payload: AssignmentCreate,
    db: Session = Depends(get_db),
    tz: ZoneInfo = Depends(get_local_tz),
):
    _ensure_course_exists(db, course_id)

    # a due date without an offset is local wall-clock time
    due = payload.due_date
    if due.tzinfo is None:
        due = due.replace(tzinfo=tz)

    a = Assignment(
        course_id=course_id,
        title=payload.title,
        description=payload.description,
        due_date=as_utc(due),
        points_possible=payload.points_possible,
        allow_late=payload.allow_late,
    )
    db.add(a)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(a)
    logger.info("created assignment %s in course %s", a.id, course_id)
    return a
