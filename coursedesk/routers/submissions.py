import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import and_
from sqlalchemy.orm import Session

from coursedesk.core.deps import get_db, get_now
from coursedesk.models.assignment import Assignment
from coursedesk.models.course import Course
from coursedesk.models.enrollment import Enrollment
from coursedesk.models.grade import Grade
from coursedesk.models.submission import Submission
from coursedesk.schemas.submission import GradeRead, GradeUpdate, RosterEntry, SubmissionCreate, SubmissionRead
from coursedesk.services.grading import CommittedGrade, GradingSession, GradingStateError
from coursedesk.services.records import as_utc, build_roster

logger = logging.getLogger(__name__)

router = APIRouter()


def _ensure_assignment_exists(db: Session, assignment_id: int) -> Assignment:
    a = db.query(Assignment).filter(Assignment.id == assignment_id).first()
    if not a:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return a


def _ensure_student_enrolled(db: Session, course_id: int, student_id: int) -> None:
    enrolled = (
        db.query(Enrollment)
        .filter(
            Enrollment.course_id == course_id,
            Enrollment.user_id == student_id,
            Enrollment.role == "student",
        )
        .first()
        is not None
    )
    if not enrolled:
        raise HTTPException(status_code=403, detail="Not enrolled in this course")


def _late_allowed(assignment: Assignment, course: Course) -> bool:
    return bool(assignment.allow_late) and course.late_policy != "reject"


@router.post(
    "/assignments/{assignment_id}/submissions",
    response_model=SubmissionRead,
    status_code=status.HTTP_201_CREATED,
)
def submit_assignment(
    assignment_id: int,
    payload: SubmissionCreate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    assignment = _ensure_assignment_exists(db, assignment_id)
    _ensure_student_enrolled(db, assignment.course_id, payload.student_id)

    is_late = now > as_utc(assignment.due_date)
    if is_late and not _late_allowed(assignment, assignment.course):
        raise HTTPException(status_code=403, detail="Late submissions are not accepted")

    # allow resubmission: replace the file on the existing row
    existing = (
        db.query(Submission)
        .filter(
            and_(
                Submission.assignment_id == assignment_id,
                Submission.student_id == payload.student_id,
            )
        )
        .first()
    )

    if existing:
        existing.file_name = payload.file_name
        existing.file_url = payload.file_url
        existing.submitted_at = now
        existing.is_late = is_late

        # a new file invalidates the previous grade
        if existing.grade is not None:
            db.delete(existing.grade)

        submission = existing
    else:
        submission = Submission(
            assignment_id=assignment_id,
            student_id=payload.student_id,
            file_name=payload.file_name,
            file_url=payload.file_url,
            submitted_at=now,
            is_late=is_late,
        )
        db.add(submission)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(submission)
    logger.info(
        "student %s submitted %r for assignment %s%s",
        payload.student_id,
        payload.file_name,
        assignment_id,
        " (late)" if is_late else "",
    )
    return submission


@router.get("/assignments/{assignment_id}/roster", response_model=list[RosterEntry])
def assignment_roster(
    assignment_id: int,
    db: Session = Depends(get_db),
):
    assignment = _ensure_assignment_exists(db, assignment_id)
    return build_roster(db, assignment)


@router.put("/submissions/{submission_id}/grade", response_model=GradeRead)
def grade_submission(
    submission_id: int,
    payload: GradeUpdate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    sub = db.query(Submission).filter(Submission.id == submission_id).first()
    if not sub:
        raise HTTPException(status_code=404, detail="Submission not found")

    assignment = sub.assignment
    roster = build_roster(db, assignment)
    index = next((i for i, s in enumerate(roster) if s.submission_id == sub.id), None)
    if index is None:
        raise HTTPException(status_code=403, detail="Student is not enrolled in this course")

    def save(result: CommittedGrade) -> None:
        grade = sub.grade or Grade(submission_id=sub.id)
        grade.points_earned = result.points_earned
        grade.feedback = result.feedback
        grade.graded_by = payload.graded_by
        grade.graded_at = now
        db.add(grade)

    session = GradingSession(roster, assignment.points_possible, on_commit=save, clock=lambda: now)
    try:
        session.select(index)
        session.edit_points(str(payload.points_earned))
        session.edit_feedback(payload.feedback or "")
        session.commit()
    except GradingStateError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    finally:
        session.close()

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(sub)
    logger.info("graded submission %s: %s/%g", sub.id, payload.points_earned, assignment.points_possible)
    return sub.grade
