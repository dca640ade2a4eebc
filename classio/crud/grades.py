# classio/crud/grades.py
import logging
from collections import defaultdict
from typing import Dict, List

from sqlalchemy.orm import Session

from classio.core.exceptions import NotFound, ValidationError
from classio.crud.errors import backend_call
from classio.db.models.grade import Grade as GradeModel
from classio.db.models.school import ClassStudent
from classio.db.models.subject import Subject
from classio.schemas.grade import Grade, GradeCreate, SubjectGradeStats
from classio.services import grades as grades_service

logger = logging.getLogger(__name__)


def get_student_grades(db: Session, student_id: int) -> List[SubjectGradeStats]:
    with backend_call(db, "загрузить оценки"):
        rows = (
            db.query(GradeModel, Subject.name)
            .join(Subject, GradeModel.subject_id == Subject.id)
            .filter(GradeModel.student_id == student_id)
            .order_by(GradeModel.created_at.desc(), GradeModel.id.desc())
            .all()
        )
    return grades_service.aggregate_by_subject(
        (grades_service.grade_from_row(g), name) for g, name in rows
    )


def get_subject_averages(db: Session, student_id: int) -> Dict[int, float]:
    return {s.subject_id: s.average for s in get_student_grades(db, student_id)}


def get_recent_grades(db: Session, student_id: int, limit: int = 5) -> List[Grade]:
    with backend_call(db, "загрузить последние оценки"):
        rows = (
            db.query(GradeModel)
            .filter(GradeModel.student_id == student_id)
            .order_by(GradeModel.created_at.desc(), GradeModel.id.desc())
            .limit(limit)
            .all()
        )
        return [grades_service.grade_from_row(g) for g in rows]


def get_teacher_subject(db: Session, teacher_id: int, subject_id: int) -> Subject:
    subject = db.query(Subject).filter(
        Subject.id == subject_id,
        Subject.teacher_id == teacher_id,
    ).first()
    if not subject:
        raise NotFound("Предмет не найден")
    return subject


def add_grade(db: Session, teacher_id: int, grade_in: GradeCreate) -> GradeModel:
    with backend_call(db, "поставить оценку"):
        subject = get_teacher_subject(db, teacher_id, grade_in.subject_id)

        # Проверяем, что ученик учится в классе этого предмета
        enrolled = db.query(ClassStudent).filter(
            ClassStudent.class_id == subject.class_id,
            ClassStudent.student_id == grade_in.student_id,
        ).first()
        if not enrolled:
            raise ValidationError("Ученик не найден в классе")

        grade = GradeModel(
            student_id=grade_in.student_id,
            subject_id=grade_in.subject_id,
            teacher_id=teacher_id,
            score=grade_in.score,
            weight=grade_in.weight,
            grade_type=grade_in.grade_type,
            comment=grade_in.comment,
        )
        db.add(grade)
        db.commit()
        db.refresh(grade)
        logger.info(f"Оценка {grade.score} (вес {grade.weight}) ученику {grade.student_id}, предмет {subject.id}")
        return grade


def delete_grade(db: Session, teacher_id: int, grade_id: int) -> None:
    with backend_call(db, "удалить оценку"):
        grade = (
            db.query(GradeModel)
            .join(Subject, GradeModel.subject_id == Subject.id)
            .filter(GradeModel.id == grade_id, Subject.teacher_id == teacher_id)
            .first()
        )
        if not grade:
            raise NotFound("Оценка не найдена")
        db.delete(grade)
        db.commit()


def get_subject_student_averages(db: Session, teacher_id: int, subject_id: int) -> Dict[int, float]:
    """Средний взвешенный балл каждого ученика по предмету учителя."""
    with backend_call(db, "посчитать средние по предмету"):
        get_teacher_subject(db, teacher_id, subject_id)
        rows = db.query(GradeModel).filter(GradeModel.subject_id == subject_id).all()

    by_student = defaultdict(list)
    for row in rows:
        by_student[row.student_id].append(grades_service.grade_from_row(row))
    return {
        student_id: grades_service.weighted_average(grades)
        for student_id, grades in sorted(by_student.items())
    }
