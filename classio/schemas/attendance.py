# classio/schemas/attendance.py
from pydantic import BaseModel, computed_field
from datetime import date, datetime
from typing import List, Optional

from classio.core.statuses import AttendanceStatus, ExcuseStatus


class AttendanceEntity(BaseModel):
    id: int
    student_id: int
    lesson_id: int
    date: date
    status: AttendanceStatus
    subject_id: Optional[int] = None
    subject_name: Optional[str] = None
    lesson_start_time: Optional[datetime] = None
    lesson_end_time: Optional[datetime] = None
    note: Optional[str] = None
    excuse_note: Optional[str] = None
    excuse_status: ExcuseStatus = ExcuseStatus.none
    excuse_attachment_url: Optional[str] = None
    recorded_by: Optional[int] = None
    recorded_at: Optional[datetime] = None
    student_name: Optional[str] = None

    @computed_field
    @property
    def can_submit_excuse(self) -> bool:
        return (
            self.status in (AttendanceStatus.absent, AttendanceStatus.late)
            and self.excuse_status != ExcuseStatus.approved
        )


class AttendanceStats(BaseModel):
    total_days: int = 0
    present_days: int = 0
    absent_days: int = 0
    late_days: int = 0
    excused_days: int = 0

    @computed_field
    @property
    def attendance_percentage(self) -> float:
        if self.total_days == 0:
            return 0.0
        return self.present_days / self.total_days * 100


class CalendarDay(BaseModel):
    date: date
    status: str


class AttendanceMark(BaseModel):
    student_id: int
    lesson_id: int
    date: date
    status: AttendanceStatus
    note: Optional[str] = None


class BulkAttendanceMark(BaseModel):
    records: List[AttendanceMark]


class ExcuseSubmit(BaseModel):
    excuse_note: str
    attachment_url: Optional[str] = None


class ExcuseReview(BaseModel):
    status: ExcuseStatus
