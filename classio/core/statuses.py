# classio/core/statuses.py
import enum
from typing import Optional


class AttendanceStatus(str, enum.Enum):
    present = "present"
    absent = "absent"
    late = "late"
    left_early = "left_early"
    excused = "excused"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["AttendanceStatus"]:
        """None для пустых и неизвестных значений."""
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        normalized = value.strip().lower().replace("-", "_")
        if normalized == "leftearly":
            normalized = "left_early"
        try:
            return cls(normalized)
        except ValueError:
            return None


class ExcuseStatus(str, enum.Enum):
    none = "none"
    pending = "pending"
    approved = "approved"
    rejected = "rejected"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ExcuseStatus":
        if value is None:
            return cls.none
        if isinstance(value, cls):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.none


class DailyAttendanceStatus(str, enum.Enum):
    all_present = "all_present"
    all_absent = "all_absent"
    was_late = "was_late"
    partial_absent = "partial_absent"
