import pytest


def test_dashboard_stats_across_all_courses(client, ids):
    r = client.get("/dashboard/stats", params={"student_id": ids["alice"]})
    assert r.status_code == 200, r.text
    body = r.json()

    # HW1 (tomorrow) and Quiz (today) are upcoming; Lab 2 is overdue, Project is 10 days out
    assert body["pending_count"] == 2
    assert body["upcoming_count"] == 2
    assert body["graded_count"] == 2
    assert body["total_count"] == 4
    # (90% + 50%) / 2, not 115/150
    assert body["average_grade"] == pytest.approx(70.0)
    assert body["average_display"] == "70.0%"
    assert body["graded_display"] == "2/4"


def test_dashboard_stats_filtered_by_course(client, ids):
    r = client.get("/dashboard/stats", params={"student_id": ids["alice"], "course_id": ids["biol"]})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["total_count"] == 1
    assert body["pending_count"] == 1
    assert body["upcoming_count"] == 1
    assert body["average_grade"] is None
    assert body["average_display"] == "N/A"


def test_weighted_course_setting_changes_average(client, ids):
    r = client.patch(f"/courses/{ids['cs61a']}/settings", json={"grade_calculation": "weighted"})
    assert r.status_code == 200, r.text

    r = client.get("/dashboard/stats", params={"student_id": ids["alice"], "course_id": ids["cs61a"]})
    assert r.json()["average_grade"] == pytest.approx(115 / 150 * 100)


def test_dashboard_stats_unknown_student(client):
    r = client.get("/dashboard/stats", params={"student_id": 9999})
    assert r.status_code == 404


def test_dashboard_stats_requires_student(client):
    r = client.get("/dashboard/stats")
    assert r.status_code == 422


def test_assignments_are_classified_and_ordered(client, ids):
    r = client.get("/assignments", params={"student_id": ids["alice"]})
    assert r.status_code == 200, r.text
    rows = r.json()

    assert [a["name"] for a in rows] == ["Lab 2", "Quiz", "HW1", "Project"]
    by_name = {a["name"]: a for a in rows}

    assert by_name["Lab 2"]["due_proximity"] == "overdue"
    assert by_name["Lab 2"]["is_overdue"] is True
    assert by_name["Lab 2"]["due_label"] == "Overdue"

    assert by_name["Quiz"]["due_proximity"] == "today"
    assert by_name["Quiz"]["due_label"] == "Today"

    assert by_name["HW1"]["due_proximity"] == "this-week"
    assert by_name["HW1"]["due_label"] == "Tomorrow"
    assert by_name["HW1"]["status"] == "graded"
    assert by_name["HW1"]["earned_points"] == 90

    assert by_name["Project"]["due_proximity"] == "future"
    assert by_name["Project"]["due_label"] == "Monday, February 17"
    assert by_name["Project"]["earned_points"] is None


def test_assignment_status_per_student(client, ids):
    r = client.get("/assignments", params={"student_id": ids["bob"], "course_id": ids["cs61a"]})
    assert r.status_code == 200, r.text
    statuses = {a["name"]: a["status"] for a in r.json()}
    assert statuses == {"Lab 2": "not-submitted", "HW1": "submitted", "Project": "not-submitted"}


def test_course_cards(client, ids):
    r = client.get("/courses", params={"student_id": ids["alice"]})
    assert r.status_code == 200, r.text
    cards = r.json()
    assert [c["code"] for c in cards] == ["BIOL 101", "CS 61A"]

    biol, cs61a = cards
    assert biol["assignments_due"] == 1
    assert biol["student_count"] == 1
    assert biol["grade"] is None
    assert biol["upcoming_assignments"][0]["due_proximity"] == "today"

    assert cs61a["assignments_due"] == 1
    assert cs61a["student_count"] == 2
    assert cs61a["grade"] == pytest.approx(70.0)
    # every assignment of the course, submitted or not, in due order
    upcoming = cs61a["upcoming_assignments"]
    assert [a["name"] for a in upcoming] == ["Lab 2", "HW1", "Project"]
    assert [a["status"] for a in upcoming] == ["graded", "graded", "not-submitted"]
    assert upcoming[0]["is_overdue"] is True


def test_course_card_hides_grade_when_disabled(client, ids):
    client.patch(f"/courses/{ids['cs61a']}/settings", json={"show_grades": False})
    r = client.get("/courses", params={"student_id": ids["alice"]})
    cs61a = [c for c in r.json() if c["code"] == "CS 61A"][0]
    assert cs61a["grade"] is None
