from tests.conftest import NOW, TestingSessionLocal

from coursedesk.db.base import Base
from coursedesk.db.seed import ASSIGNMENTS, COURSES, seed
from coursedesk.models.assignment import Assignment
from coursedesk.models.course import Course
from coursedesk.models.user import User


def _clear(db):
    for table in reversed(Base.metadata.sorted_tables):
        db.execute(table.delete())
    db.commit()


def test_seed_loads_demo_dataset(client):
    db = TestingSessionLocal()
    try:
        _clear(db)
        seed(db, NOW)
        assert db.query(Course).count() == len(COURSES)
        assert db.query(Assignment).count() == len(ASSIGNMENTS) + 1
        alice_id = db.query(User).filter(User.email == "alice@example.com").one().id
        homework_id = db.query(Assignment).filter(Assignment.title.startswith("Homework 1")).one().id

        # second run is a no-op
        seed(db, NOW)
        assert db.query(Course).count() == len(COURSES)
    finally:
        db.close()

    r = client.get("/dashboard/stats", params={"student_id": alice_id})
    body = r.json()
    assert body["total_count"] == 15
    assert body["graded_count"] == 1
    assert body["average_display"] == "95.0%"
    # today x2, tomorrow x2, 2..7 days x5, plus the CS 61A homework
    assert body["upcoming_count"] == 10

    roster = client.get(f"/assignments/{homework_id}/roster").json()
    statuses = [s["submission_status"] for s in roster]
    assert statuses == ["graded", "submitted", "not-submitted", "graded", "submitted"]

    cards = client.get("/courses", params={"student_id": alice_id}).json()
    math = [c for c in cards if c["code"] == "MATH 201"][0]
    assert math["grade"] is None
    assert math["assignments_due"] == 2
