from datetime import date, datetime
from types import SimpleNamespace

from classio.services.schedule import db_to_weekday, map_week, week_monday


def lesson_row(lesson_id, day_of_week, start="09:00", end="09:45", subject_id=1):
    teacher = SimpleNamespace(first_name="Иван", last_name="Петров")
    subject = SimpleNamespace(id=subject_id, name="Математика", teacher=teacher)
    return SimpleNamespace(
        id=lesson_id,
        subject_id=subject_id,
        subject=subject,
        day_of_week=day_of_week,
        start_time=start,
        end_time=end,
        room="101",
    )


def test_all_seven_days_present():
    week = map_week([], date(2024, 1, 1))
    assert sorted(week) == [1, 2, 3, 4, 5, 6, 7]
    assert all(lessons == [] for lessons in week.values())


def test_sunday_goes_to_slot_seven():
    week = map_week([lesson_row(1, 0)], date(2024, 1, 1))
    lesson = week[7][0]
    assert lesson.start_time == datetime(2024, 1, 7, 9, 0)
    assert lesson.end_time == datetime(2024, 1, 7, 9, 45)
    assert lesson.subject.teacher_name == "Иван Петров"


def test_week_start_normalized_to_monday():
    assert week_monday(date(2024, 1, 3)) == date(2024, 1, 1)
    week = map_week([lesson_row(1, 1)], date(2024, 1, 5))
    assert week[1][0].start_time == datetime(2024, 1, 1, 9, 0)


def test_missing_time_uses_first_slot():
    week = map_week([lesson_row(1, 2, start=None, end=None)], date(2024, 1, 1))
    lesson = week[2][0]
    assert lesson.start_time == datetime(2024, 1, 2, 8, 0)
    assert lesson.end_time == datetime(2024, 1, 2, 8, 45)


def test_seconds_in_time_accepted():
    week = map_week([lesson_row(1, 3, start="10:15:00", end="11:00:00")], date(2024, 1, 1))
    assert week[3][0].start_time == datetime(2024, 1, 3, 10, 15)


def test_row_order_preserved_within_day():
    rows = [lesson_row(1, 4, "08:00", "08:45"), lesson_row(2, 4, "10:00", "10:45")]
    week = map_week(rows, date(2024, 1, 1))
    assert [lesson.id for lesson in week[4]] == [1, 2]


def test_db_to_weekday():
    assert db_to_weekday(0) == 7
    assert db_to_weekday(1) == 1
    assert db_to_weekday(6) == 6
