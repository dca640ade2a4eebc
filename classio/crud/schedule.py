# classio/crud/schedule.py
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from classio.core.exceptions import NotFound, ValidationError
from classio.crud.errors import backend_call
from classio.db.models.school import SchoolClass
from classio.db.models.subject import Lesson as LessonModel, Subject as SubjectModel
from classio.schemas.schedule import Lesson, LessonCreate, SubjectCreate
from classio.services import schedule as schedule_service


def _class_lessons(db: Session, class_id: int):
    # У уроков нет class_id: класс определяется через предмет
    return (
        db.query(LessonModel)
        .join(SubjectModel, LessonModel.subject_id == SubjectModel.id)
        .options(joinedload(LessonModel.subject).joinedload(SubjectModel.teacher))
        .filter(SubjectModel.class_id == class_id)
    )


def get_week_lessons(db: Session, class_id: Optional[int], week_start: date) -> Dict[int, List[Lesson]]:
    if class_id is None:
        return schedule_service.map_week([], week_start)
    with backend_call(db, "загрузить расписание"):
        rows = _class_lessons(db, class_id).order_by(LessonModel.start_time.asc(), LessonModel.id).all()
        return schedule_service.map_week(rows, week_start)


def get_day_lessons(db: Session, class_id: Optional[int], day: date) -> List[Lesson]:
    if class_id is None:
        return []
    db_day = schedule_service.weekday_to_db(day.isoweekday())
    with backend_call(db, "загрузить уроки на день"):
        rows = (
            _class_lessons(db, class_id)
            .filter(LessonModel.day_of_week == db_day)
            .order_by(LessonModel.start_time.asc(), LessonModel.id)
            .all()
        )
        return [schedule_service.map_lesson(r, day) for r in rows]


def get_teacher_day_lessons(db: Session, teacher_id: int, day: date) -> List[Lesson]:
    db_day = schedule_service.weekday_to_db(day.isoweekday())
    with backend_call(db, "загрузить уроки учителя"):
        rows = (
            db.query(LessonModel)
            .join(SubjectModel, LessonModel.subject_id == SubjectModel.id)
            .options(joinedload(LessonModel.subject).joinedload(SubjectModel.teacher))
            .filter(SubjectModel.teacher_id == teacher_id, LessonModel.day_of_week == db_day)
            .order_by(LessonModel.start_time.asc(), LessonModel.id)
            .all()
        )
        return [schedule_service.map_lesson(r, day) for r in rows]


def get_teacher_lesson(db: Session, teacher_id: int, lesson_id: int) -> LessonModel:
    lesson = (
        db.query(LessonModel)
        .join(SubjectModel, LessonModel.subject_id == SubjectModel.id)
        .filter(LessonModel.id == lesson_id, SubjectModel.teacher_id == teacher_id)
        .first()
    )
    if not lesson:
        raise NotFound("Урок не найден")
    return lesson


def _validate_clock(value: Optional[str], field: str) -> None:
    if value is None:
        return
    try:
        hour, minute = schedule_service.parse_clock(value)
    except (ValueError, IndexError):
        raise ValidationError(f"{field}: ожидается время в формате HH:MM")
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise ValidationError(f"{field}: время вне диапазона")


def create_subject(db: Session, school_id: int, subject_in: SubjectCreate) -> SubjectModel:
    with backend_call(db, "создать предмет"):
        school_class = db.query(SchoolClass).filter(
            SchoolClass.id == subject_in.class_id,
            SchoolClass.school_id == school_id,
        ).first()
        if not school_class:
            raise NotFound("Класс не найден")
        subject = SubjectModel(**subject_in.model_dump())
        db.add(subject)
        db.commit()
        db.refresh(subject)
        return subject


def create_lesson(db: Session, school_id: int, lesson_in: LessonCreate) -> LessonModel:
    if not 0 <= lesson_in.day_of_week <= 6:
        raise ValidationError("day_of_week: от 0 (воскресенье) до 6 (суббота)")
    _validate_clock(lesson_in.start_time, "start_time")
    _validate_clock(lesson_in.end_time, "end_time")
    if lesson_in.start_time and lesson_in.end_time:
        if schedule_service.parse_clock(lesson_in.start_time) >= schedule_service.parse_clock(lesson_in.end_time):
            raise ValidationError("Урок должен заканчиваться позже, чем начинается")

    with backend_call(db, "создать урок"):
        subject = (
            db.query(SubjectModel)
            .join(SchoolClass, SubjectModel.class_id == SchoolClass.id)
            .filter(SubjectModel.id == lesson_in.subject_id, SchoolClass.school_id == school_id)
            .first()
        )
        if not subject:
            raise NotFound("Предмет не найден")
        lesson = LessonModel(**lesson_in.model_dump())
        db.add(lesson)
        db.commit()
        db.refresh(lesson)
        return lesson
