"""
Load the demo dataset: six dashboard courses, a CS 61A course with a
graded/submitted/missing roster for Homework 1, and its announcements.

Due dates are relative to the moment the script runs.

    python -m coursedesk.db.seed
"""
import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from coursedesk.db.init_db import init_db
from coursedesk.db.session import SessionLocal
from coursedesk.models.announcement import Announcement
from coursedesk.models.assignment import Assignment
from coursedesk.models.course import Course
from coursedesk.models.enrollment import Enrollment
from coursedesk.models.grade import Grade
from coursedesk.models.submission import Submission
from coursedesk.models.user import User

logger = logging.getLogger(__name__)

# code, name, color, invite code, grade calculation
COURSES = [
    ("BIOL 101", "Introduction to Biology", "#10B981", "BIOL1011", "simple"),
    ("ENGL 203", "Advanced Composition", "#3B82F6", "ENGL2031", "simple"),
    ("CS 150", "Data Structures and Algorithms", "#8B5CF6", "CS150001", "simple"),
    ("HIST 101", "World History", "#EAB308", "HIST1011", "simple"),
    ("MATH 201", "Calculus II", "#F97316", "MATH2011", "simple"),
    ("PSYC 101", "Introduction to Psychology", "#EC4899", "PSYC1011", "simple"),
    ("CS 61A", "Structure and Interpretation of Computer Programs", "#4F46E5", "CS61A001", "simple"),
]

# course code, title, points, days from now
ASSIGNMENTS = [
    ("BIOL 101", "Chapter 5 Quiz", 50, 1),
    ("BIOL 101", "Lab Report 3", 100, 5),
    ("BIOL 101", "Discussion Post: Cell Division", 30, 7),
    ("ENGL 203", "Essay Draft", 100, -2),
    ("ENGL 203", "Peer Review Assignment", 50, 0),
    ("ENGL 203", "Final Essay", 200, 13),
    ("CS 150", "Programming Assignment 4", 150, 4),
    ("CS 150", "Midterm Exam", 300, 11),
    ("HIST 101", "Reading Quiz Chapter 7", 40, 1),
    ("HIST 101", "Primary Source Analysis", 100, 6),
    ("HIST 101", "Discussion Response", 30, 8),
    ("HIST 101", "Research Paper Outline", 80, 10),
    ("MATH 201", "Problem Set 6", 100, 0),
    ("MATH 201", "Problem Set 7", 100, 7),
]

# name, email, (file, days ago, earned points, feedback) or None
ROSTER = [
    ("Alice Chen", "alice@example.com", ("homework1.pdf", 5, 95, "Great work! Minor issue on problem 3.")),
    ("Bob Smith", "bob@example.com", ("hw1_bob.pdf", 2, None, None)),
    ("Carol Wu", "carol@example.com", None),
    ("David Kim", "david@example.com", ("hw1_david.pdf", 6, 88, "Good effort. Review problem 2 concepts.")),
    ("Eva Martinez", "eva@example.com", ("homework1_eva.pdf", 1, None, None)),
]

# title, content, hours ago, pinned
ANNOUNCEMENTS = [
    (
        "Homework 1 Due Date Extended",
        "Due to the holiday, HW1 is now due two days later than planned. "
        "Please use the extra time wisely to review your solutions.",
        2,
        True,
    ),
    (
        "Office Hours Updated",
        "Starting this week, office hours will be held in Soda 271 on Tuesdays "
        "and Thursdays from 2-4 PM. Please check the calendar for the latest schedule.",
        24,
        False,
    ),
    (
        "Midterm 1 Information",
        "Midterm 1 will cover lectures 1-10 and homework 1-3. A review session "
        "will be held on Friday at 5 PM in Wheeler Auditorium.",
        72,
        False,
    ),
]


def seed(db: Session, now: datetime) -> None:
    if db.query(User).first() is not None:
        logger.info("database already has users, skipping seed")
        return

    instructor = User(email="instructor@example.com", name="Prof. John DeNero", role="instructor")
    db.add(instructor)

    students = [User(email=email, name=name, role="student") for name, email, _ in ROSTER]
    db.add_all(students)
    db.flush()
    alice = students[0]

    courses: dict[str, Course] = {}
    for code, name, color, invite, calculation in COURSES:
        course = Course(
            code=code,
            name=name,
            semester="Spring 2025",
            color=color,
            instructor_id=instructor.id,
            invite_code=invite,
            grade_calculation=calculation,
        )
        db.add(course)
        courses[code] = course
    db.flush()

    for course in courses.values():
        db.add(Enrollment(user_id=instructor.id, course_id=course.id, role="instructor"))
        db.add(Enrollment(user_id=alice.id, course_id=course.id, role="student"))

    for code, title, points, days in ASSIGNMENTS:
        db.add(
            Assignment(
                course_id=courses[code].id,
                title=title,
                points_possible=points,
                due_date=now + timedelta(days=days),
            )
        )

    cs61a = courses["CS 61A"]
    homework = Assignment(
        course_id=cs61a.id,
        title="Homework 1: Recursion and Tree Recursion",
        description="Implement count_partitions, tree_map and flatten.",
        points_possible=100,
        due_date=now + timedelta(days=2),
    )
    db.add(homework)
    db.flush()

    for student, (_name, _email, submitted) in zip(students, ROSTER):
        if student is not alice:
            db.add(Enrollment(user_id=student.id, course_id=cs61a.id, role="student"))
        if submitted is None:
            continue

        file_name, days_ago, earned, feedback = submitted
        submission = Submission(
            assignment_id=homework.id,
            student_id=student.id,
            file_name=file_name,
            submitted_at=now - timedelta(days=days_ago),
        )
        db.add(submission)
        db.flush()
        if earned is not None:
            db.add(
                Grade(
                    submission_id=submission.id,
                    points_earned=earned,
                    feedback=feedback,
                    graded_by=instructor.id,
                    graded_at=now,
                )
            )

    for title, content, hours_ago, pinned in ANNOUNCEMENTS:
        db.add(
            Announcement(
                course_id=cs61a.id,
                title=title,
                content=content,
                posted_by=instructor.id,
                is_pinned=pinned,
                created_at=now - timedelta(hours=hours_ago),
            )
        )

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "seeded %d users, %d courses, %d assignments",
        len(students) + 1,
        len(courses),
        len(ASSIGNMENTS) + 1,
    )


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    init_db()
    db = SessionLocal()
    try:
        seed(db, datetime.now(timezone.utc))
    finally:
        db.close()


if __name__ == "__main__":
    main()
