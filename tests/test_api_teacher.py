from datetime import timedelta

from classio.core.clock import utcnow
from classio.core.roles import UserRole
from classio.db.models import Attendance, Lesson, Subject
from conftest import auth_headers


def mark(client, s, status, day="2024-01-08", student=None):
    return client.post(
        "/api/teacher/attendance",
        json={
            "student_id": (student or s.student).id,
            "lesson_id": s.lesson.id,
            "date": day,
            "status": status,
        },
        headers=auth_headers(s.teacher),
    )


def test_mark_attendance_upserts(client, db, school_setup):
    s = school_setup
    first = mark(client, s, "absent")
    assert first.status_code == 200
    assert first.json()["status"] == "absent"
    assert first.json()["recorded_by"] == s.teacher.id

    second = mark(client, s, "late")
    assert second.json()["id"] == first.json()["id"]
    assert db.query(Attendance).count() == 1

    lesson_rows = client.get(
        f"/api/teacher/lessons/{s.lesson.id}/attendance",
        params={"day": "2024-01-08"},
        headers=auth_headers(s.teacher),
    ).json()
    assert [(r["student_id"], r["status"]) for r in lesson_rows] == [(s.student.id, "late")]


def test_mark_attendance_foreign_lesson(client, db, school_setup, make_user):
    s = school_setup
    stranger = make_user(UserRole.teacher, s.school.id)
    response = client.post(
        "/api/teacher/attendance",
        json={"student_id": s.student.id, "lesson_id": s.lesson.id, "date": "2024-01-08", "status": "present"},
        headers=auth_headers(stranger),
    )
    assert response.status_code == 404


def test_mark_attendance_student_outside_class(client, db, school_setup, make_user):
    s = school_setup
    outsider = make_user(UserRole.student, s.school.id)
    assert mark(client, s, "present", student=outsider).status_code == 400


def test_bulk_mark_is_all_or_nothing(client, db, school_setup, make_user):
    s = school_setup
    outsider = make_user(UserRole.student, s.school.id)
    headers = auth_headers(s.teacher)

    records = [
        {"student_id": s.student.id, "lesson_id": s.lesson.id, "date": "2024-01-08", "status": "present"},
        {"student_id": outsider.id, "lesson_id": s.lesson.id, "date": "2024-01-08", "status": "absent"},
    ]
    assert client.post("/api/teacher/attendance/bulk", json={"records": records}, headers=headers).status_code == 400
    assert db.query(Attendance).count() == 0

    records[1]["student_id"] = s.other_student.id
    response = client.post("/api/teacher/attendance/bulk", json={"records": records}, headers=headers)
    assert response.status_code == 200
    assert response.json() == {"marked": 2}
    assert db.query(Attendance).count() == 2



def test_bulk_mark_repeated_record_last_wins(client, db, school_setup):
    s = school_setup
    key = {"student_id": s.student.id, "lesson_id": s.lesson.id, "date": "2024-01-08"}
    records = [dict(key, status="absent"), dict(key, status="late", note="Опоздал на 10 минут")]

    response = client.post("/api/teacher/attendance/bulk", json={"records": records}, headers=auth_headers(s.teacher))
    assert response.status_code == 200
    row = db.query(Attendance).one()
    assert row.status == "late"
    assert row.note == "Опоздал на 10 минут"

def test_excuse_review_flow(client, db, school_setup):
    s = school_setup
    attendance_id = mark(client, s, "absent").json()["id"]
    client.post(
        f"/api/parent/attendance/{attendance_id}/excuse",
        json={"excuse_note": "Была у врача"},
        headers=auth_headers(s.parent),
    )
    headers = auth_headers(s.teacher)

    pending = client.get("/api/teacher/excuses", headers=headers).json()
    assert [(p["id"], p["student_name"]) for p in pending] == [(attendance_id, "Маша Иванова")]
    assert client.get("/api/teacher/stats", headers=headers).json()["pending_excuses"] == 1

    reviewed = client.post(f"/api/teacher/excuses/{attendance_id}/review", json={"status": "approved"}, headers=headers)
    assert reviewed.status_code == 200
    assert reviewed.json()["excuse_status"] == "approved"
    assert reviewed.json()["can_submit_excuse"] is False

    again = client.post(f"/api/teacher/excuses/{attendance_id}/review", json={"status": "rejected"}, headers=headers)
    assert again.status_code == 400
    assert client.get("/api/teacher/excuses", headers=headers).json() == []

    # После одобрения родитель не может отправить объяснительную повторно
    resend = client.post(
        f"/api/parent/attendance/{attendance_id}/excuse",
        json={"excuse_note": "Ещё раз"},
        headers=auth_headers(s.parent),
    )
    assert resend.status_code == 400


def test_review_requires_decision(client, db, school_setup):
    s = school_setup
    attendance_id = mark(client, s, "absent").json()["id"]
    response = client.post(
        f"/api/teacher/excuses/{attendance_id}/review", json={"status": "pending"}, headers=auth_headers(s.teacher)
    )
    assert response.status_code == 400


def test_grades(client, db, school_setup):
    s = school_setup
    headers = auth_headers(s.teacher)

    first = client.post(
        "/api/teacher/grades",
        json={"student_id": s.student.id, "subject_id": s.subject.id, "score": 5, "grade_type": "test"},
        headers=headers,
    )
    assert first.status_code == 200
    client.post(
        "/api/teacher/grades",
        json={"student_id": s.student.id, "subject_id": s.subject.id, "score": 3, "weight": 2},
        headers=headers,
    )
    zero_weight = client.post(
        "/api/teacher/grades",
        json={"student_id": s.student.id, "subject_id": s.subject.id, "score": 3, "weight": 0},
        headers=headers,
    )
    assert zero_weight.status_code == 422

    averages = client.get(f"/api/teacher/subjects/{s.subject.id}/averages", headers=headers).json()
    assert round(averages[str(s.student.id)], 4) == 3.6667

    student_view = client.get("/api/student/grades", headers=auth_headers(s.student)).json()
    assert [g["description"] for g in student_view[0]["grades"]][-1] == "test"

    deleted = client.delete(f"/api/teacher/grades/{first.json()['id']}", headers=headers)
    assert deleted.status_code == 200
    averages = client.get(f"/api/teacher/subjects/{s.subject.id}/averages", headers=headers).json()
    assert averages[str(s.student.id)] == 3.0


def test_grade_for_student_outside_class(client, db, school_setup, make_user):
    s = school_setup
    outsider = make_user(UserRole.student, s.school.id)
    response = client.post(
        "/api/teacher/grades",
        json={"student_id": outsider.id, "subject_id": s.subject.id, "score": 4},
        headers=auth_headers(s.teacher),
    )
    assert response.status_code == 400


def test_assignment_flow(client, db, school_setup):
    s = school_setup
    teacher_headers = auth_headers(s.teacher)
    student_headers = auth_headers(s.student)
    due = (utcnow() + timedelta(days=2)).replace(microsecond=0).isoformat()

    created = client.post(
        "/api/teacher/assignments",
        json={"subject_id": s.subject.id, "title": "Задачи 1-10", "due_date": due},
        headers=teacher_headers,
    )
    assert created.status_code == 200
    assignment_id = created.json()["id"]

    upcoming = client.get("/api/student/assignments", headers=student_headers).json()
    assert [(a["id"], a["is_completed"]) for a in upcoming] == [(assignment_id, False)]

    empty = client.post(f"/api/student/assignments/{assignment_id}/submit", json={}, headers=student_headers)
    assert empty.status_code == 400

    submitted = client.post(
        f"/api/student/assignments/{assignment_id}/submit", json={"content": "Ответы"}, headers=student_headers
    )
    assert submitted.status_code == 200

    upcoming = client.get("/api/student/assignments", headers=student_headers).json()
    assert upcoming[0]["is_completed"] is True

    submissions = client.get(f"/api/teacher/assignments/{assignment_id}/submissions", headers=teacher_headers).json()
    assert len(submissions) == 1

    graded = client.post(
        f"/api/teacher/submissions/{submissions[0]['id']}/grade",
        json={"grade": 5, "feedback": "Отлично"},
        headers=teacher_headers,
    )
    assert graded.json()["grade"] == 5.0
    assert graded.json()["graded_at"] is not None

    parent_view = client.get(f"/api/parent/children/{s.student.id}/assignments", headers=auth_headers(s.parent))
    assert parent_view.json()[0]["is_completed"] is True


def test_subjects_and_stats(client, db, school_setup):
    s = school_setup
    db.add(Lesson(subject_id=s.subject.id, day_of_week=3, start_time="10:00", end_time="10:45"))
    db.add(Subject(name="Геометрия", class_id=s.school_class.id, teacher_id=s.teacher.id))
    db.commit()
    headers = auth_headers(s.teacher)

    subjects = client.get("/api/teacher/subjects", headers=headers).json()
    assert [subject["name"] for subject in subjects] == ["Геометрия", "Математика"]

    stats = client.get("/api/teacher/stats", headers=headers).json()
    assert stats["total_subjects"] == 2
    assert stats["total_lessons"] == 2
    assert stats["total_classes"] == 1

    monday = client.get("/api/teacher/lessons", params={"day": "2024-01-08"}, headers=headers).json()
    assert [lesson["room"] for lesson in monday] == ["101"]


def test_teacher_routes_need_teacher_role(client, school_setup):
    response = client.get("/api/teacher/subjects", headers=auth_headers(school_setup.student))
    assert response.status_code == 403
    assert response.json()["detail"] == "Недостаточно прав"
