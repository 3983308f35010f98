"""
Load per-student assignment records and grading rosters from the database.
"""
from datetime import datetime, timezone, tzinfo

from sqlalchemy import and_
from sqlalchemy.orm import Session

from coursedesk.models.assignment import Assignment
from coursedesk.models.course import Course
from coursedesk.models.enrollment import Enrollment
from coursedesk.models.grade import Grade
from coursedesk.models.submission import Submission
from coursedesk.models.user import User
from coursedesk.schemas.assignment import AssignmentRecord, AssignmentView
from coursedesk.schemas.submission import RosterEntry
from coursedesk.services.due_dates import classify, format_due_date


def as_utc(value: datetime | None) -> datetime | None:
    # SQLite drops the offset, so everything is stored as UTC and naive values read back as UTC
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def submission_status(submission: Submission | None, grade: Grade | None) -> str:
    if submission is None:
        return "not-submitted"
    if grade is None or grade.points_earned is None:
        return "submitted"
    return "graded"


def student_assignments(
    db: Session,
    student_id: int,
    course_id: int | None = None,
) -> list[AssignmentRecord]:
    """Assignments of every course the student is enrolled in, with their status."""
    q = (
        db.query(Assignment, Course, Submission, Grade)
        .select_from(Assignment)
        .join(Course, Course.id == Assignment.course_id)
        .join(
            Enrollment,
            and_(Enrollment.course_id == Course.id, Enrollment.user_id == student_id),
        )
        .outerjoin(
            Submission,
            and_(
                Submission.assignment_id == Assignment.id,
                Submission.student_id == student_id,
            ),
        )
        .outerjoin(Grade, Grade.submission_id == Submission.id)
    )
    if course_id is not None:
        q = q.filter(Assignment.course_id == course_id)

    rows = q.order_by(Assignment.due_date.asc(), Assignment.id.asc()).all()

    records: list[AssignmentRecord] = []
    for assignment, course, submission, grade in rows:
        status = submission_status(submission, grade)
        records.append(
            AssignmentRecord(
                id=assignment.id,
                course_id=course.id,
                course_code=course.code,
                course_color=course.color,
                name=assignment.title,
                due_date=as_utc(assignment.due_date),
                status=status,
                points=assignment.points_possible,
                earned_points=grade.points_earned if status == "graded" else None,
            )
        )
    return records


def to_view(record: AssignmentRecord, now: datetime, tz: tzinfo | None = None) -> AssignmentView:
    c = classify(record.due_date, now, tz)
    return AssignmentView(
        **record.model_dump(),
        is_overdue=c.is_overdue,
        due_proximity=c.proximity,
        due_label=format_due_date(record.due_date, now, tz),
    )


def build_roster(db: Session, assignment: Assignment) -> list[RosterEntry]:
    rows = (
        db.query(User, Submission, Grade)
        .select_from(User)
        .join(
            Enrollment,
            and_(
                Enrollment.user_id == User.id,
                Enrollment.course_id == assignment.course_id,
                Enrollment.role == "student",
            ),
        )
        .outerjoin(
            Submission,
            and_(
                Submission.student_id == User.id,
                Submission.assignment_id == assignment.id,
            ),
        )
        .outerjoin(Grade, Grade.submission_id == Submission.id)
        .order_by(User.name.asc(), User.id.asc())
        .all()
    )

    roster: list[RosterEntry] = []
    for user, submission, grade in rows:
        status = submission_status(submission, grade)
        roster.append(
            RosterEntry(
                id=user.id,
                name=user.name,
                submission_id=submission.id if submission else None,
                submission_status=status,
                submitted_at=as_utc(submission.submitted_at) if submission else None,
                is_late=bool(submission and submission.is_late),
                file=submission.file_name if submission else None,
                earned_points=grade.points_earned if status == "graded" else None,
                feedback=grade.feedback if grade else None,
            )
        )
    return roster
