import os
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

TEST_DB_FILE = "test_coursedesk.db"
TEST_DB_URL = f"sqlite:///./{TEST_DB_FILE}"

# must be set before coursedesk.core.config is imported
os.environ["DATABASE_URL"] = TEST_DB_URL
os.environ["COURSEDESK_TIMEZONE"] = "UTC"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from coursedesk.core.deps import get_db, get_local_tz, get_now  # noqa: E402
from coursedesk.db.base import Base  # noqa: E402
from coursedesk.main import app  # noqa: E402
from coursedesk.models.assignment import Assignment  # noqa: E402
from coursedesk.models.course import Course  # noqa: E402
from coursedesk.models.enrollment import Enrollment  # noqa: E402
from coursedesk.models.grade import Grade  # noqa: E402
from coursedesk.models.submission import Submission  # noqa: E402
from coursedesk.models.user import User  # noqa: E402

# Friday afternoon
NOW = datetime(2025, 2, 7, 15, 30, tzinfo=timezone.utc)

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)


@pytest.fixture(autouse=True)
def seed_data():
    """
    Seed a clean minimal dataset for each test.

    Alice is enrolled in CS 61A and BIOL 101, Bob only in CS 61A.
    Alice: HW1 graded 90/100, Lab 2 graded 25/50, Project and Quiz open.
    Bob: HW1 submitted, not graded.
    """
    db = TestingSessionLocal()
    try:
        # Clear tables (child -> parent)
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()

        instructor = User(email="instructor@example.com", name="Prof. John DeNero", role="instructor")
        alice = User(email="alice@example.com", name="Alice Chen", role="student")
        bob = User(email="bob@example.com", name="Bob Smith", role="student")
        db.add_all([instructor, alice, bob])
        db.flush()

        cs61a = Course(
            code="CS 61A",
            name="Structure and Interpretation of Computer Programs",
            semester="Spring 2025",
            color="#4F46E5",
            instructor_id=instructor.id,
            invite_code="CS61A001",
        )
        biol = Course(
            code="BIOL 101",
            name="Introduction to Biology",
            semester="Spring 2025",
            color="#10B981",
            instructor_id=instructor.id,
            invite_code="BIOL1011",
        )
        db.add_all([cs61a, biol])
        db.flush()

        db.add_all(
            [
                Enrollment(user_id=instructor.id, course_id=cs61a.id, role="instructor"),
                Enrollment(user_id=alice.id, course_id=cs61a.id, role="student"),
                Enrollment(user_id=bob.id, course_id=cs61a.id, role="student"),
                Enrollment(user_id=alice.id, course_id=biol.id, role="student"),
            ]
        )

        hw1 = Assignment(course_id=cs61a.id, title="HW1", points_possible=100, due_date=NOW + timedelta(days=1))
        lab2 = Assignment(course_id=cs61a.id, title="Lab 2", points_possible=50, due_date=NOW - timedelta(days=2))
        project = Assignment(course_id=cs61a.id, title="Project", points_possible=200, due_date=NOW + timedelta(days=10))
        quiz = Assignment(course_id=biol.id, title="Quiz", points_possible=50, due_date=NOW)
        db.add_all([hw1, lab2, project, quiz])
        db.flush()

        alice_hw1 = Submission(assignment_id=hw1.id, student_id=alice.id, file_name="homework1.pdf", submitted_at=NOW - timedelta(days=1))
        alice_lab2 = Submission(assignment_id=lab2.id, student_id=alice.id, file_name="lab2.pdf", submitted_at=NOW - timedelta(days=3))
        bob_hw1 = Submission(assignment_id=hw1.id, student_id=bob.id, file_name="hw1_bob.pdf", submitted_at=NOW - timedelta(hours=5))
        db.add_all([alice_hw1, alice_lab2, bob_hw1])
        db.flush()

        db.add_all(
            [
                Grade(submission_id=alice_hw1.id, points_earned=90, feedback="Great work!", graded_by=instructor.id),
                Grade(submission_id=alice_lab2.id, points_earned=25, graded_by=instructor.id),
            ]
        )
        db.commit()

        yield {
            "instructor": instructor.id,
            "alice": alice.id,
            "bob": bob.id,
            "cs61a": cs61a.id,
            "biol": biol.id,
            "hw1": hw1.id,
            "lab2": lab2.id,
            "project": project.id,
            "quiz": quiz.id,
            "bob_hw1": bob_hw1.id,
            "alice_hw1": alice_hw1.id,
        }
    finally:
        db.close()


@pytest.fixture()
def ids(seed_data):
    return seed_data


@pytest.fixture()
def client():
    """Test client that uses the test DB session and a fixed clock."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = lambda: NOW
    app.dependency_overrides[get_local_tz] = lambda: ZoneInfo("UTC")
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
