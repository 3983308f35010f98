import logging
import secrets
import string
from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from coursedesk.core.config import INVITE_CODE_LENGTH
from coursedesk.core.deps import get_db, get_local_tz, get_now
from coursedesk.models.course import Course
from coursedesk.models.enrollment import Enrollment
from coursedesk.models.user import User
from coursedesk.schemas.course import CourseCard, CourseCreate, CourseSettingsRead, CourseSettingsUpdate
from coursedesk.services.records import student_assignments, to_view
from coursedesk.services.stats import average_grade, filter_by_course

logger = logging.getLogger(__name__)

router = APIRouter()

INVITE_ALPHABET = string.ascii_uppercase + string.digits


def _ensure_course_exists(db: Session, course_id: int) -> Course:
    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


def _ensure_user_exists(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _new_invite_code(db: Session) -> str:
    while True:
        code = "".join(secrets.choice(INVITE_ALPHABET) for _ in range(INVITE_CODE_LENGTH))
        if not db.query(Course.id).filter(Course.invite_code == code).first():
            return code


@router.get("", response_model=list[CourseCard])
def list_course_cards(
    student_id: int = Query(...),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    tz: ZoneInfo = Depends(get_local_tz),
):
    _ensure_user_exists(db, student_id)

    courses = (
        db.query(Course)
        .join(Enrollment, Enrollment.course_id == Course.id)
        .filter(Enrollment.user_id == student_id)
        .order_by(Course.code.asc())
        .all()
    )

    student_counts = dict(
        db.query(Enrollment.course_id, func.count(Enrollment.id))
        .filter(Enrollment.role == "student")
        .group_by(Enrollment.course_id)
        .all()
    )

    records = student_assignments(db, student_id)

    cards: list[CourseCard] = []
    for c in courses:
        course_records = filter_by_course(records, c.id)
        upcoming = [to_view(r, now, tz) for r in course_records]
        cards.append(
            CourseCard(
                id=c.id,
                code=c.code,
                name=c.name,
                semester=c.semester,
                color=c.color,
                assignments_due=sum(1 for r in course_records if r.status == "not-submitted"),
                student_count=student_counts.get(c.id, 0),
                grade=average_grade(course_records, c.grade_calculation) if c.show_grades else None,
                upcoming_assignments=upcoming,
            )
        )

    return cards


@router.post("", response_model=CourseSettingsRead, status_code=status.HTTP_201_CREATED)
def create_course(
    payload: CourseCreate,
    db: Session = Depends(get_db),
):
    if payload.instructor_id is not None:
        _ensure_user_exists(db, payload.instructor_id)

    course = Course(
        code=payload.code,
        name=payload.name,
        semester=payload.semester,
        color=payload.color,
        instructor_id=payload.instructor_id,
        invite_code=_new_invite_code(db),
    )
    db.add(course)

    try:
        db.flush()
        if payload.instructor_id is not None:
            db.add(Enrollment(user_id=payload.instructor_id, course_id=course.id, role="instructor"))
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(course)
    logger.info("created course %s (%s)", course.id, course.code)
    return course


@router.get("/{course_id}", response_model=CourseSettingsRead)
def get_course(course_id: int, db: Session = Depends(get_db)):
    return _ensure_course_exists(db, course_id)


@router.patch("/{course_id}/settings", response_model=CourseSettingsRead)
def update_course_settings(
    course_id: int,
    payload: CourseSettingsUpdate,
    db: Session = Depends(get_db),
):
    course = _ensure_course_exists(db, course_id)

    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if value is None and field not in ("color", "enrollment_limit"):
            raise HTTPException(status_code=400, detail=f"{field} cannot be null")
        setattr(course, field, value)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(course)
    logger.info("updated settings for course %s: %s", course.id, sorted(changes))
    return course
