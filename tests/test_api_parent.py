from datetime import date

from classio.core.roles import UserRole
from classio.db.models import Attendance, Grade
from conftest import auth_headers

DENIED = "Не найдено или доступ запрещён"


def add_attendance(db, student, lesson, day, status):
    record = Attendance(student_id=student.id, lesson_id=lesson.id, date=day, status=status)
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def test_children_list(client, school_setup):
    response = client.get("/api/parent/children", headers=auth_headers(school_setup.parent))
    assert response.status_code == 200
    assert [c["id"] for c in response.json()] == [school_setup.student.id]


def test_other_child_denied(client, school_setup):
    headers = auth_headers(school_setup.parent)
    other_id = school_setup.other_student.id
    for path in ("attendance", "attendance/stats", "grades", "schedule", "assignments", "excuses"):
        response = client.get(f"/api/parent/children/{other_id}/{path}", headers=headers)
        assert response.status_code == 403, path
        assert response.json()["detail"] == DENIED


def test_parent_routes_need_parent_role(client, school_setup):
    response = client.get("/api/parent/children", headers=auth_headers(school_setup.teacher))
    assert response.status_code == 403


def test_attendance_stats_and_calendar(client, db, school_setup):
    s = school_setup
    add_attendance(db, s.student, s.lesson, date(2024, 1, 8), "present")
    add_attendance(db, s.student, s.lesson, date(2024, 1, 15), "absent")
    add_attendance(db, s.student, s.lesson, date(2024, 1, 22), "late")
    add_attendance(db, s.student, s.lesson, date(2024, 1, 29), "excused")
    add_attendance(db, s.student, s.lesson, date(2024, 2, 5), "absent")
    headers = auth_headers(s.parent)

    stats = client.get(
        f"/api/parent/children/{s.student.id}/attendance/stats", params={"month": "2024-01"}, headers=headers
    ).json()
    assert stats["total_days"] == 4
    assert stats["present_days"] == 1
    assert stats["absent_days"] == 1
    assert stats["late_days"] == 1
    assert stats["excused_days"] == 1
    assert stats["attendance_percentage"] == 25.0

    calendar = client.get(
        f"/api/parent/children/{s.student.id}/attendance/calendar",
        params={"month": 1, "year": 2024},
        headers=headers,
    ).json()
    assert calendar == [
        {"date": "2024-01-08", "status": "all_present"},
        {"date": "2024-01-15", "status": "all_absent"},
        {"date": "2024-01-22", "status": "was_late"},
        {"date": "2024-01-29", "status": "all_present"},
    ]

    bad = client.get(
        f"/api/parent/children/{s.student.id}/attendance/stats", params={"month": "2024/01"}, headers=headers
    )
    assert bad.status_code == 400


def test_calendar_rejects_zero_month_and_year(client, school_setup):
    s = school_setup
    url = f"/api/parent/children/{s.student.id}/attendance/calendar"
    headers = auth_headers(s.parent)
    assert client.get(url, params={"month": 0, "year": 2024}, headers=headers).status_code == 400
    assert client.get(url, params={"month": 1, "year": 0}, headers=headers).status_code == 400
    assert client.get(url, headers=headers).status_code == 200

    student_headers = auth_headers(s.student)
    own = client.get("/api/student/attendance/calendar", params={"month": 0}, headers=student_headers)
    assert own.status_code == 400
    assert own.json()["detail"] == "Неверный месяц: 0"


def test_attendance_issues(client, db, school_setup):
    s = school_setup
    add_attendance(db, s.student, s.lesson, date(2024, 1, 8), "present")
    add_attendance(db, s.student, s.lesson, date(2024, 1, 15), "absent")
    add_attendance(db, s.student, s.lesson, date(2024, 1, 22), "late")

    issues = client.get(
        f"/api/parent/children/{s.student.id}/attendance/issues", headers=auth_headers(s.parent)
    ).json()
    assert [i["date"] for i in issues] == ["2024-01-22", "2024-01-15"]
    assert issues[0]["subject_name"] == "Математика"
    assert issues[0]["lesson_start_time"] == "2024-01-22T09:00:00"


def test_submit_excuse(client, db, school_setup):
    s = school_setup
    record = add_attendance(db, s.student, s.lesson, date(2024, 1, 15), "absent")
    headers = auth_headers(s.parent)

    response = client.post(
        f"/api/parent/attendance/{record.id}/excuse", json={"excuse_note": "Болела"}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["excuse_status"] == "pending"

    pending = client.get(
        f"/api/parent/children/{s.student.id}/excuses", params={"pending_only": True}, headers=headers
    ).json()
    assert [e["id"] for e in pending] == [record.id]

    empty = client.post(f"/api/parent/attendance/{record.id}/excuse", json={"excuse_note": "  "}, headers=headers)
    assert empty.status_code == 400


def test_excuse_for_present_record_rejected(client, db, school_setup):
    s = school_setup
    record = add_attendance(db, s.student, s.lesson, date(2024, 1, 15), "present")
    response = client.post(
        f"/api/parent/attendance/{record.id}/excuse", json={"excuse_note": "?"}, headers=auth_headers(s.parent)
    )
    assert response.status_code == 400


def test_excuse_for_foreign_or_missing_record_denied(client, db, school_setup):
    s = school_setup
    foreign = add_attendance(db, s.other_student, s.lesson, date(2024, 1, 15), "absent")
    headers = auth_headers(s.parent)

    for attendance_id in (foreign.id, 99999):
        response = client.post(
            f"/api/parent/attendance/{attendance_id}/excuse", json={"excuse_note": "Болел"}, headers=headers
        )
        assert response.status_code == 403
        assert response.json()["detail"] == DENIED


def test_child_grades(client, db, school_setup):
    s = school_setup
    db.add_all([
        Grade(student_id=s.student.id, subject_id=s.subject.id, teacher_id=s.teacher.id, score=5.0, weight=1.0),
        Grade(student_id=s.student.id, subject_id=s.subject.id, teacher_id=s.teacher.id, score=3.0, weight=2.0),
    ])
    db.commit()
    headers = auth_headers(s.parent)

    grades = client.get(f"/api/parent/children/{s.student.id}/grades", headers=headers).json()
    assert len(grades) == 1
    assert grades[0]["subject_name"] == "Математика"
    assert round(grades[0]["average"], 4) == 3.6667

    averages = client.get(f"/api/parent/children/{s.student.id}/grades/averages", headers=headers).json()
    assert round(averages[str(s.subject.id)], 4) == 3.6667


def test_new_child_visible_after_link(client, db, school_setup, make_user):
    s = school_setup
    sibling = make_user(UserRole.student, s.school.id, "Коля", "Иванов")
    headers = auth_headers(s.parent)

    # Список детей уже в кэше
    assert len(client.get("/api/parent/children", headers=headers).json()) == 1

    linked = client.post(
        f"/api/principal/parents/{s.parent.id}/children/{sibling.id}", headers=auth_headers(s.principal)
    )
    assert linked.status_code == 200

    children = client.get("/api/parent/children", headers=headers).json()
    assert sorted(c["id"] for c in children) == sorted([s.student.id, sibling.id])
    assert client.get(f"/api/parent/children/{sibling.id}/attendance", headers=headers).status_code == 200


def test_refresh(client, school_setup):
    response = client.post("/api/parent/refresh", headers=auth_headers(school_setup.parent))
    assert response.status_code == 200
