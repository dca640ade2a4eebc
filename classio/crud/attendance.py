# classio/crud/attendance.py
import logging
from datetime import date, datetime
from typing import Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from classio.core.clock import utcnow
from classio.core.exceptions import NotFound, ValidationError
from classio.core.statuses import AttendanceStatus, DailyAttendanceStatus, ExcuseStatus
from classio.crud.errors import backend_call
from classio.db.models.attendance import Attendance
from classio.db.models.subject import Lesson, Subject
from classio.schemas.attendance import AttendanceEntity, AttendanceStats
from classio.services import attendance as attendance_service
from classio.services.schedule import parse_clock

logger = logging.getLogger(__name__)


def _lesson_moment(day: date, clock: Optional[str]) -> Optional[datetime]:
    if not clock:
        return None
    hour, minute = parse_clock(clock)
    return datetime(day.year, day.month, day.day, hour, minute)


def to_entity(row: Attendance) -> AttendanceEntity:
    lesson = row.lesson
    subject = lesson.subject if lesson is not None else None
    student = row.student
    return AttendanceEntity(
        id=row.id,
        student_id=row.student_id,
        lesson_id=row.lesson_id,
        date=row.date,
        # Неизвестный статус в карточке показываем как присутствие
        status=AttendanceStatus.parse(row.status) or AttendanceStatus.present,
        subject_id=subject.id if subject is not None else None,
        subject_name=subject.name if subject is not None else None,
        lesson_start_time=_lesson_moment(row.date, lesson.start_time) if lesson else None,
        lesson_end_time=_lesson_moment(row.date, lesson.end_time) if lesson else None,
        note=row.note,
        excuse_note=row.excuse_note,
        excuse_status=ExcuseStatus.parse(row.excuse_status),
        excuse_attachment_url=row.excuse_attachment_url,
        recorded_by=row.recorded_by,
        recorded_at=row.recorded_at,
        student_name=student.full_name if student is not None else None,
    )


def _with_lesson(db: Session):
    return db.query(Attendance).options(
        joinedload(Attendance.lesson).joinedload(Lesson.subject),
        joinedload(Attendance.student),
    )


def get_student_attendance(
    db: Session,
    student_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[AttendanceEntity]:
    with backend_call(db, "загрузить посещаемость"):
        query = _with_lesson(db).filter(Attendance.student_id == student_id)
        if start_date is not None:
            query = query.filter(Attendance.date >= start_date)
        if end_date is not None:
            query = query.filter(Attendance.date <= end_date)
        rows = query.order_by(Attendance.date.desc(), Attendance.id.desc()).all()
        return [to_entity(r) for r in rows]


def get_attendance_stats(db: Session, student_id: int, month: Optional[str], today: date) -> AttendanceStats:
    start_date, end_date = attendance_service.parse_month(month, today)
    with backend_call(db, "посчитать статистику посещаемости"):
        rows = db.query(Attendance.status).filter(
            Attendance.student_id == student_id,
            Attendance.date >= start_date,
            Attendance.date <= end_date,
        ).all()
    return attendance_service.summarize(status for (status,) in rows)


def get_attendance_calendar(db: Session, student_id: int, month: int, year: int) -> Dict[date, DailyAttendanceStatus]:
    start_date, end_date = attendance_service.month_bounds(year, month)
    with backend_call(db, "загрузить календарь посещаемости"):
        rows = db.query(Attendance.date, Attendance.status).filter(
            Attendance.student_id == student_id,
            Attendance.date >= start_date,
            Attendance.date <= end_date,
        ).all()
    return attendance_service.build_calendar((d, s) for d, s in rows)


def get_attendance_issues(db: Session, student_id: int, limit: int = 10) -> List[AttendanceEntity]:
    with backend_call(db, "загрузить пропуски и опоздания"):
        rows = (
            _with_lesson(db)
            .filter(
                Attendance.student_id == student_id,
                Attendance.status.in_([AttendanceStatus.absent.value, AttendanceStatus.late.value]),
            )
            .order_by(Attendance.date.desc(), Attendance.id.desc())
            .limit(limit)
            .all()
        )
        return [to_entity(r) for r in rows]


def get_excuses(db: Session, student_id: int, pending_only: bool = False) -> List[AttendanceEntity]:
    with backend_call(db, "загрузить объяснительные"):
        query = _with_lesson(db).filter(
            Attendance.student_id == student_id,
            Attendance.excuse_note.isnot(None),
        )
        if pending_only:
            query = query.filter(Attendance.excuse_status == ExcuseStatus.pending.value)
        rows = query.order_by(Attendance.date.desc(), Attendance.id.desc()).all()
        return [to_entity(r) for r in rows]


def get_attendance_student_id(db: Session, attendance_id: int) -> int:
    with backend_call(db, "найти запись посещаемости"):
        row = db.query(Attendance.student_id).filter(Attendance.id == attendance_id).first()
    if row is None:
        raise NotFound(f"Запись посещаемости {attendance_id} не найдена")
    return row[0]


def submit_excuse(db: Session, attendance_id: int, excuse_note: str, attachment_url: Optional[str] = None) -> AttendanceEntity:
    """Доступ к ребёнку проверяет вызывающий код."""
    if not excuse_note or not excuse_note.strip():
        raise ValidationError("Текст объяснительной не может быть пустым")

    with backend_call(db, "отправить объяснительную"):
        record = _with_lesson(db).filter(Attendance.id == attendance_id).first()
        if record is None:
            raise NotFound(f"Запись посещаемости {attendance_id} не найдена")
        if not to_entity(record).can_submit_excuse:
            raise ValidationError("Для этой записи нельзя отправить объяснительную")

        record.excuse_note = excuse_note.strip()
        record.excuse_status = ExcuseStatus.pending.value
        record.excuse_attachment_url = attachment_url
        db.commit()
        db.refresh(record)
        logger.info(f"Объяснительная отправлена: attendance_id={attendance_id}")
        return to_entity(record)


def mark_attendance(
    db: Session,
    teacher_id: int,
    student_id: int,
    lesson_id: int,
    day: date,
    status: AttendanceStatus,
    note: Optional[str] = None,
    commit: bool = True,
) -> Attendance:
    # Находим или создаём запись
    existing = db.query(Attendance).filter(
        Attendance.student_id == student_id,
        Attendance.lesson_id == lesson_id,
        Attendance.date == day,
    ).first()

    if existing:
        existing.status = status.value
        existing.note = note if note is not None else existing.note
    else:
        existing = Attendance(
            student_id=student_id,
            lesson_id=lesson_id,
            date=day,
            status=status.value,
            note=note,
            excuse_status=ExcuseStatus.none.value,
        )
        db.add(existing)
        # autoflush выключен: без flush повтор в той же транзакции не найдёт запись
        db.flush()
    existing.recorded_by = teacher_id
    existing.recorded_at = utcnow()

    if commit:
        db.commit()
        db.refresh(existing)
    return existing


def get_lesson_attendance(db: Session, lesson_id: int, day: date) -> List[AttendanceEntity]:
    with backend_call(db, "загрузить посещаемость урока"):
        rows = (
            _with_lesson(db)
            .filter(Attendance.lesson_id == lesson_id, Attendance.date == day)
            .order_by(Attendance.student_id)
            .all()
        )
        return [to_entity(r) for r in rows]


def get_pending_excuses_for_teacher(db: Session, teacher_id: int) -> List[AttendanceEntity]:
    with backend_call(db, "загрузить объяснительные на проверку"):
        rows = (
            _with_lesson(db)
            .join(Lesson, Attendance.lesson_id == Lesson.id)
            .join(Subject, Lesson.subject_id == Subject.id)
            .filter(
                Subject.teacher_id == teacher_id,
                Attendance.excuse_status == ExcuseStatus.pending.value,
                Attendance.excuse_note.isnot(None),
            )
            .order_by(Attendance.date.desc(), Attendance.id.desc())
            .all()
        )
        return [to_entity(r) for r in rows]


def review_excuse(db: Session, teacher_id: int, attendance_id: int, status: ExcuseStatus) -> AttendanceEntity:
    if status not in (ExcuseStatus.approved, ExcuseStatus.rejected):
        raise ValidationError("Объяснительную можно только одобрить или отклонить")

    with backend_call(db, "проверить объяснительную"):
        record = (
            _with_lesson(db)
            .join(Lesson, Attendance.lesson_id == Lesson.id)
            .join(Subject, Lesson.subject_id == Subject.id)
            .filter(Attendance.id == attendance_id, Subject.teacher_id == teacher_id)
            .first()
        )
        if record is None:
            raise NotFound(f"Запись посещаемости {attendance_id} не найдена")
        if ExcuseStatus.parse(record.excuse_status) != ExcuseStatus.pending:
            raise ValidationError("Объяснительная уже проверена или не отправлялась")

        record.excuse_status = status.value
        db.commit()
        db.refresh(record)
        logger.info(f"Объяснительная attendance_id={attendance_id}: {status.value} (учитель {teacher_id})")
        return to_entity(record)
