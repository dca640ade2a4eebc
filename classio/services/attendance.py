# classio/services/attendance.py
"""
Классификация посещаемости.

classify_day сворачивает статусы всех уроков за день в один статус
для ячейки календаря, summarize считает итоги за период.
"""
import calendar
from collections import defaultdict
from datetime import date
from typing import Iterable, Optional, Tuple

from classio.core.exceptions import ValidationError
from classio.core.statuses import AttendanceStatus, DailyAttendanceStatus
from classio.schemas.attendance import AttendanceStats


def classify_day(statuses: Iterable[AttendanceStatus]) -> DailyAttendanceStatus:
    statuses = list(statuses)
    if all(s == AttendanceStatus.present for s in statuses):
        return DailyAttendanceStatus.all_present
    if all(s == AttendanceStatus.absent for s in statuses):
        return DailyAttendanceStatus.all_absent
    if any(s == AttendanceStatus.late for s in statuses):
        return DailyAttendanceStatus.was_late
    if any(s == AttendanceStatus.absent for s in statuses):
        return DailyAttendanceStatus.partial_absent
    # Смесь present/excused/left_early считается "все присутствовали"
    return DailyAttendanceStatus.all_present


def summarize(statuses: Iterable[Optional[str]]) -> AttendanceStats:
    """
    Итоги за период по сырым статусам из БД.

    total_days равно числу строк, поэтому строки с пустым или неизвестным
    статусом попадают в total_days, но ни в одну из категорий.
    """
    total = present = absent = late = excused = 0
    for raw in statuses:
        total += 1
        status = AttendanceStatus.parse(raw)
        if status == AttendanceStatus.present:
            present += 1
        elif status == AttendanceStatus.absent:
            absent += 1
        elif status in (AttendanceStatus.late, AttendanceStatus.left_early):
            late += 1
        elif status == AttendanceStatus.excused:
            excused += 1

    return AttendanceStats(
        total_days=total,
        present_days=present,
        absent_days=absent,
        late_days=late,
        excused_days=excused,
    )


def build_calendar(rows: Iterable[Tuple[date, Optional[str]]]) -> dict:
    """{дата: DailyAttendanceStatus} по строкам (date, status); дни без известных статусов пропускаются."""
    by_date = defaultdict(list)
    for day, raw in rows:
        status = AttendanceStatus.parse(raw)
        if status is not None:
            by_date[day].append(status)
    return {day: classify_day(statuses) for day, statuses in sorted(by_date.items())}


def parse_month(month: Optional[str], today: date) -> Tuple[date, date]:
    """'YYYY-MM' → (первый день, последний день). Без месяца берётся текущий."""
    if month is None:
        return month_bounds(today.year, today.month)
    parts = month.split("-")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValidationError(f"Неверный формат месяца: {month!r}, ожидается YYYY-MM")
    return month_bounds(int(parts[0]), int(parts[1]))


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    if not 1 <= month <= 12:
        raise ValidationError(f"Неверный месяц: {month}")
    if not 1 <= year <= 9999:
        raise ValidationError(f"Неверный год: {year}")
    _, last_day = calendar.monthrange(year, month)
    return date(year, month, 1), date(year, month, last_day)
