# classio/services/schedule.py
"""
Раскладка уроков по неделе.

В БД день недели хранится как в Postgres (0 = воскресенье),
в API ISO-номер (1 = понедельник ... 7 = воскресенье).
"""
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from classio.core.config import settings
from classio.schemas.schedule import Lesson, Subject
from classio.services.grades import subject_color


def db_to_weekday(day_of_week: int) -> int:
    return 7 if day_of_week == 0 else day_of_week


def weekday_to_db(weekday: int) -> int:
    return 0 if weekday == 7 else weekday


def week_monday(day: date) -> date:
    if isinstance(day, datetime):
        day = day.date()
    return day - timedelta(days=day.isoweekday() - 1)


def parse_clock(value: str) -> Tuple[int, int]:
    """'HH:MM' или 'HH:MM:SS' → (часы, минуты)."""
    parts = value.strip().split(":")
    return int(parts[0]), int(parts[1])


def _at(day: date, clock: str) -> datetime:
    hour, minute = parse_clock(clock)
    return datetime(day.year, day.month, day.day, hour, minute)


def teacher_name(first_name: Optional[str], last_name: Optional[str]) -> Optional[str]:
    if first_name is None and last_name is None:
        return None
    return " ".join(part for part in (first_name, last_name) if part)


def map_lesson(row, day: date) -> Lesson:
    subject = row.subject
    teacher = subject.teacher if subject is not None else None
    subject_id = subject.id if subject is not None else row.subject_id

    if row.start_time and row.end_time:
        start, end = _at(day, row.start_time), _at(day, row.end_time)
    else:
        # Нет времени в расписании: ставим в первый слот
        start = _at(day, settings.DEFAULT_LESSON_START)
        end = _at(day, settings.DEFAULT_LESSON_END)

    return Lesson(
        id=row.id,
        subject=Subject(
            id=subject_id,
            name=subject.name if subject is not None else "Unknown Subject",
            color=subject_color(subject_id),
            teacher_name=teacher_name(teacher.first_name, teacher.last_name) if teacher else None,
        ),
        start_time=start,
        end_time=end,
        room=row.room or "",
    )


def map_week(lesson_rows: Iterable, week_start: date) -> Dict[int, List[Lesson]]:
    monday = week_monday(week_start)
    week = {weekday: [] for weekday in range(1, 8)}
    # Порядок внутри дня как в запросе (по start_time)
    for row in lesson_rows:
        weekday = db_to_weekday(row.day_of_week)
        day = monday + timedelta(days=weekday - 1)
        week[weekday].append(map_lesson(row, day))
    return week
