# classio/crud/school.py
import logging
from datetime import date
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from classio.core.exceptions import NotFound
from classio.core.roles import UserRole
from classio.core.statuses import ExcuseStatus
from classio.crud import invite as crud_invite
from classio.crud.errors import backend_call
from classio.db.models.attendance import Attendance
from classio.db.models.school import School, SchoolClass
from classio.db.models.subject import Lesson, Subject
from classio.db.models.user import User
from classio.schemas.school import ClassCreate, SchoolCreate, SchoolStats, SchoolWithStats, TeacherStats
from classio.services.schedule import weekday_to_db

logger = logging.getLogger(__name__)


def get_school(db: Session, school_id: int) -> School:
    with backend_call(db, "найти школу"):
        school = db.query(School).filter(School.id == school_id).first()
    if not school:
        raise NotFound("Школа не найдена")
    return school


def create_school(db: Session, school_in: SchoolCreate) -> School:
    with backend_call(db, "создать школу"):
        school = School(name=school_in.name)
        db.add(school)
        db.commit()
        db.refresh(school)
    logger.info(f"Создана школа: id={school.id}, название={school.name}")
    return school


def get_all_schools(db: Session) -> List[SchoolWithStats]:
    """Все школы по названию со счётчиками пользователей и классов."""
    with backend_call(db, "загрузить список школ"):
        schools = db.query(School).order_by(School.name, School.id).all()
        role_counts = (
            db.query(User.school_id, User.role, func.count(User.id))
            .filter(User.school_id.isnot(None))
            .group_by(User.school_id, User.role)
            .all()
        )
        class_counts = dict(
            db.query(SchoolClass.school_id, func.count(SchoolClass.id))
            .group_by(SchoolClass.school_id)
            .all()
        )

    by_school = {}
    for school_id, role, count in role_counts:
        by_school.setdefault(school_id, {})[role] = count

    result = []
    for school in schools:
        counts = by_school.get(school.id, {})
        result.append(SchoolWithStats(
            id=school.id,
            name=school.name,
            created_at=school.created_at,
            total_users=sum(counts.values()),
            total_students=counts.get(UserRole.student, 0),
            total_teachers=counts.get(UserRole.teacher, 0),
            total_classes=class_counts.get(school.id, 0),
        ))
    return result

def get_school_stats(db: Session, school_id: int) -> SchoolStats:
    with backend_call(db, "посчитать статистику школы"):
        counts = dict(
            db.query(User.role, func.count(User.id))
            .filter(User.school_id == school_id)
            .group_by(User.role)
            .all()
        )
        total_classes = db.query(SchoolClass).filter(SchoolClass.school_id == school_id).count()

    teachers = counts.get(UserRole.teacher, 0)
    admins = counts.get(UserRole.admin, 0) + counts.get(UserRole.bigadmin, 0)
    return SchoolStats(
        total_staff=teachers + admins,
        total_teachers=teachers,
        total_admins=admins,
        total_classes=total_classes,
        total_students=counts.get(UserRole.student, 0),
        total_parents=counts.get(UserRole.parent, 0),
        active_invite_codes=crud_invite.count_active_codes(db, school_id),
    )


def create_class(db: Session, school_id: int, class_in: ClassCreate) -> SchoolClass:
    with backend_call(db, "создать класс"):
        if class_in.head_teacher_id is not None:
            teacher = db.query(User).filter(
                User.id == class_in.head_teacher_id,
                User.school_id == school_id,
                User.role == UserRole.teacher,
            ).first()
            if not teacher:
                raise NotFound("Учитель не найден")
        school_class = SchoolClass(school_id=school_id, name=class_in.name, head_teacher_id=class_in.head_teacher_id)
        db.add(school_class)
        db.commit()
        db.refresh(school_class)
        return school_class


def get_teacher_subjects(db: Session, teacher_id: int) -> List[Subject]:
    with backend_call(db, "загрузить предметы учителя"):
        return db.query(Subject).filter(Subject.teacher_id == teacher_id).order_by(Subject.name).all()


def get_teacher_stats(db: Session, teacher_id: int, today: date) -> TeacherStats:
    with backend_call(db, "посчитать статистику учителя"):
        subjects = db.query(Subject.id, Subject.class_id).filter(Subject.teacher_id == teacher_id).all()
        if not subjects:
            return TeacherStats()
        subject_ids = [s.id for s in subjects]
        lessons = db.query(Lesson.id, Lesson.day_of_week).filter(Lesson.subject_id.in_(subject_ids)).all()
        db_day = weekday_to_db(today.isoweekday())
        pending = (
            db.query(Attendance)
            .join(Lesson, Attendance.lesson_id == Lesson.id)
            .filter(
                Lesson.subject_id.in_(subject_ids),
                Attendance.excuse_status == ExcuseStatus.pending.value,
            )
            .count()
        )

    return TeacherStats(
        total_subjects=len(subjects),
        total_lessons=len(lessons),
        total_classes=len({s.class_id for s in subjects}),
        todays_lessons=sum(1 for lesson in lessons if lesson.day_of_week == db_day),
        pending_excuses=pending,
    )
