from tests.conftest import TestingSessionLocal

from coursedesk.models.user import User


def _new_user(email="carol@example.com", name="Carol Wu") -> int:
    db = TestingSessionLocal()
    try:
        user = User(email=email, name=name, role="student")
        db.add(user)
        db.commit()
        return user.id
    finally:
        db.close()


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_db_connectivity_check(client):
    r = client.get("/api/test-db")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["user_count"] == 1
    assert body["timestamp"].startswith("2025-02-07T15:30")


def test_create_course_generates_invite_code(client, ids):
    r = client.post(
        "/courses",
        json={
            "code": "MATH 201",
            "name": "Calculus II",
            "semester": "Spring 2025",
            "color": "#F97316",
            "instructor_id": ids["instructor"],
        },
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert len(body["invite_code"]) == 8
    assert body["grade_calculation"] == "simple"
    assert body["allow_self_enrollment"] is True


def test_create_course_rejects_bad_color(client):
    r = client.post("/courses", json={"code": "X", "name": "X", "semester": "Fall", "color": "blue"})
    assert r.status_code == 422


def test_get_unknown_course(client):
    assert client.get("/courses/9999").status_code == 404


def test_update_settings(client, ids):
    r = client.patch(
        f"/courses/{ids['cs61a']}/settings",
        json={"late_penalty": 20, "hide_student_names": True, "enrollment_limit": 100},
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["late_penalty"] == 20
    assert body["hide_student_names"] is True
    assert body["enrollment_limit"] == 100
    assert body["late_policy"] == "deduct"


def test_update_settings_validation(client, ids):
    assert client.patch(f"/courses/{ids['cs61a']}/settings", json={"late_penalty": 150}).status_code == 422
    assert client.patch(f"/courses/{ids['cs61a']}/settings", json={"grade_calculation": "curve"}).status_code == 422
    assert client.patch(f"/courses/{ids['cs61a']}/settings", json={"name": None}).status_code == 400


def test_join_course_with_invite_code(client, ids):
    carol = _new_user()
    r = client.post("/enrollments", json={"user_id": carol, "invite_code": "cs61a001"})
    assert r.status_code == 201, r.text
    assert r.json()["course_id"] == ids["cs61a"]

    r = client.post("/enrollments", json={"user_id": carol, "invite_code": "CS61A001"})
    assert r.status_code == 409


def test_join_course_invalid_code(client):
    carol = _new_user()
    r = client.post("/enrollments", json={"user_id": carol, "invite_code": "NOPE0000"})
    assert r.status_code == 404


def test_join_course_self_enrollment_disabled(client, ids):
    client.patch(f"/courses/{ids['cs61a']}/settings", json={"allow_self_enrollment": False})
    carol = _new_user()
    r = client.post("/enrollments", json={"user_id": carol, "invite_code": "CS61A001"})
    assert r.status_code == 403


def test_join_course_when_full(client, ids):
    client.patch(f"/courses/{ids['cs61a']}/settings", json={"enrollment_limit": 2})
    carol = _new_user()
    r = client.post("/enrollments", json={"user_id": carol, "invite_code": "CS61A001"})
    assert r.status_code == 409
    assert r.json()["detail"] == "Course is full"


def test_announcements_pinned_first(client, ids):
    for title, pinned in [("Office Hours Updated", False), ("HW1 Due Date Extended", True), ("Midterm Info", False)]:
        r = client.post(
            f"/courses/{ids['cs61a']}/announcements",
            json={"title": title, "content": "...", "posted_by": ids["instructor"], "is_pinned": pinned},
        )
        assert r.status_code == 201, r.text

    r = client.get(f"/courses/{ids['cs61a']}/announcements")
    assert r.status_code == 200
    rows = r.json()
    assert rows[0]["title"] == "HW1 Due Date Extended"
    assert rows[0]["author_name"] == "Prof. John DeNero"
    assert {a["title"] for a in rows[1:]} == {"Office Hours Updated", "Midterm Info"}


def test_announcement_unknown_author(client, ids):
    r = client.post(
        f"/courses/{ids['cs61a']}/announcements",
        json={"title": "x", "content": "y", "posted_by": 9999},
    )
    assert r.status_code == 404
