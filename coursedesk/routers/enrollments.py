import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coursedesk.core.deps import get_db
from coursedesk.models.course import Course
from coursedesk.models.enrollment import Enrollment
from coursedesk.models.user import User
from coursedesk.schemas.enrollment import EnrollmentCreate, EnrollmentOut

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=EnrollmentOut, status_code=status.HTTP_201_CREATED)
def join_course(
    payload: EnrollmentCreate,
    db: Session = Depends(get_db),
):
    if not db.query(User.id).filter(User.id == payload.user_id).first():
        raise HTTPException(status_code=404, detail="User not found")

    course = db.query(Course).filter(Course.invite_code == payload.invite_code.upper()).first()
    if not course:
        raise HTTPException(status_code=404, detail="Invalid invite code")

    if payload.role == "student":
        if not course.allow_self_enrollment:
            raise HTTPException(status_code=403, detail="Self enrollment is disabled for this course")

        if course.enrollment_limit is not None:
            enrolled = (
                db.query(func.count(Enrollment.id))
                .filter(Enrollment.course_id == course.id, Enrollment.role == "student")
                .scalar()
            ) or 0
            if enrolled >= course.enrollment_limit:
                raise HTTPException(status_code=409, detail="Course is full")

    enrollment = Enrollment(user_id=payload.user_id, course_id=course.id, role=payload.role)
    db.add(enrollment)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Already enrolled")

    db.refresh(enrollment)
    logger.info("user %s joined course %s as %s", payload.user_id, course.id, payload.role)
    return enrollment
