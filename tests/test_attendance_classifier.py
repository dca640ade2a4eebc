from datetime import date

import pytest

from classio.core.exceptions import ValidationError
from classio.core.statuses import AttendanceStatus, DailyAttendanceStatus, ExcuseStatus
from classio.schemas.attendance import AttendanceEntity, AttendanceStats
from classio.services.attendance import build_calendar, classify_day, month_bounds, parse_month, summarize

P = AttendanceStatus.present
A = AttendanceStatus.absent
L = AttendanceStatus.late
E = AttendanceStatus.excused
LE = AttendanceStatus.left_early


@pytest.mark.parametrize(
    "statuses, expected",
    [
        ([P, P, P], DailyAttendanceStatus.all_present),
        ([A, A], DailyAttendanceStatus.all_absent),
        ([P, L, A], DailyAttendanceStatus.was_late),
        ([A, L], DailyAttendanceStatus.was_late),
        ([P, A], DailyAttendanceStatus.partial_absent),
        ([P, E], DailyAttendanceStatus.all_present),
        ([LE, P], DailyAttendanceStatus.all_present),
        ([E], DailyAttendanceStatus.all_present),
    ],
)
def test_classify_day(statuses, expected):
    assert classify_day(statuses) == expected


def test_summarize_counts_buckets():
    stats = summarize(["present", "absent", "late", "left_early", "excused", "present"])
    assert stats.total_days == 6
    assert stats.present_days == 2
    assert stats.absent_days == 1
    assert stats.late_days == 2
    assert stats.excused_days == 1


def test_summarize_unknown_status_counts_only_in_total():
    stats = summarize(["present", "sick", None])
    assert stats.total_days == 3
    assert stats.present_days == 1
    assert stats.absent_days + stats.late_days + stats.excused_days == 0


def test_summarize_accepts_camel_case_left_early():
    assert summarize(["leftEarly"]).late_days == 1


def test_attendance_percentage():
    assert AttendanceStats().attendance_percentage == 0.0
    stats = AttendanceStats(total_days=4, present_days=3)
    assert stats.attendance_percentage == pytest.approx(75.0)


def test_build_calendar_skips_unknown_statuses():
    rows = [
        (date(2024, 1, 2), "present"),
        (date(2024, 1, 1), "present"),
        (date(2024, 1, 1), "late"),
        (date(2024, 1, 3), "unknown"),
        (date(2024, 1, 3), None),
    ]
    calendar = build_calendar(rows)
    assert list(calendar) == [date(2024, 1, 1), date(2024, 1, 2)]
    assert calendar[date(2024, 1, 1)] == DailyAttendanceStatus.was_late
    assert calendar[date(2024, 1, 2)] == DailyAttendanceStatus.all_present


def test_parse_month():
    assert parse_month("2024-02", date(2030, 1, 1)) == (date(2024, 2, 1), date(2024, 2, 29))
    assert parse_month(None, date(2023, 4, 15)) == (date(2023, 4, 1), date(2023, 4, 30))


@pytest.mark.parametrize("bad", ["2024/02", "2024-13", "february", "2024-02-01"])
def test_parse_month_rejects_bad_format(bad):
    with pytest.raises(ValidationError):
        parse_month(bad, date(2024, 1, 1))


def test_month_bounds_december():
    assert month_bounds(2023, 12) == (date(2023, 12, 1), date(2023, 12, 31))


def test_status_parse():
    assert AttendanceStatus.parse("LATE") == AttendanceStatus.late
    assert AttendanceStatus.parse("left-early") == AttendanceStatus.left_early
    assert AttendanceStatus.parse(AttendanceStatus.absent) == AttendanceStatus.absent
    assert AttendanceStatus.parse("sick") is None
    assert ExcuseStatus.parse(None) == ExcuseStatus.none
    assert ExcuseStatus.parse("Pending") == ExcuseStatus.pending


@pytest.mark.parametrize(
    "status, excuse_status, expected",
    [
        (A, ExcuseStatus.none, True),
        (L, ExcuseStatus.rejected, True),
        (A, ExcuseStatus.pending, True),
        (A, ExcuseStatus.approved, False),
        (P, ExcuseStatus.none, False),
        (E, ExcuseStatus.none, False),
    ],
)
def test_can_submit_excuse(status, excuse_status, expected):
    entity = AttendanceEntity(
        id=1, student_id=1, lesson_id=1, date=date(2024, 1, 1), status=status, excuse_status=excuse_status
    )
    assert entity.can_submit_excuse is expected
