# classio/api/teacher.py
import logging
from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from classio.api.deps import get_db, require_teacher
from classio.core.clock import today
from classio.core.exceptions import ValidationError
from classio.crud import assignment as crud_assignment
from classio.crud import attendance as crud_attendance
from classio.crud import grades as crud_grades
from classio.crud import schedule as crud_schedule
from classio.crud import school as crud_school
from classio.crud.errors import backend_call
from classio.db.models.school import ClassStudent
from classio.db.models.subject import Subject
from classio.db.models.user import User
from classio.schemas.assignment import AssignmentCreate, AssignmentOut, SubmissionGrade, SubmissionOut
from classio.schemas.attendance import AttendanceEntity, AttendanceMark, BulkAttendanceMark, ExcuseReview
from classio.schemas.grade import GradeCreate, GradeOut
from classio.schemas.schedule import Lesson, SubjectOut
from classio.schemas.school import TeacherStats

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/subjects", response_model=List[SubjectOut])
def get_my_subjects(db: Session = Depends(get_db), current_user: User = Depends(require_teacher)):
    return crud_school.get_teacher_subjects(db, current_user.id)


@router.get("/stats", response_model=TeacherStats)
def get_my_stats(db: Session = Depends(get_db), current_user: User = Depends(require_teacher)):
    return crud_school.get_teacher_stats(db, current_user.id, today())


@router.get("/lessons", response_model=List[Lesson])
def get_lessons_for_day(
    day: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    return crud_schedule.get_teacher_day_lessons(db, current_user.id, day or today())


# ---------- Посещаемость ----------

def _check_mark(db: Session, teacher_id: int, record: AttendanceMark) -> None:
    lesson = crud_schedule.get_teacher_lesson(db, teacher_id, record.lesson_id)
    # Проверяем, что ученик учится в классе этого урока
    enrolled = (
        db.query(ClassStudent)
        .join(Subject, Subject.class_id == ClassStudent.class_id)
        .filter(Subject.id == lesson.subject_id, ClassStudent.student_id == record.student_id)
        .first()
    )
    if not enrolled:
        raise ValidationError("Ученик не найден в классе")


@router.post("/attendance", response_model=AttendanceEntity)
def mark_attendance(
    record: AttendanceMark,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    with backend_call(db, "отметить посещаемость"):
        _check_mark(db, current_user.id, record)
        row = crud_attendance.mark_attendance(
            db, current_user.id, record.student_id, record.lesson_id, record.date, record.status, record.note
        )
        logger.info(f"Учитель {current_user.id}: ученик {record.student_id}, урок {record.lesson_id}, {record.status.value}")
        return crud_attendance.to_entity(row)


@router.post("/attendance/bulk")
def bulk_mark_attendance(
    payload: BulkAttendanceMark,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    # Всё или ничего: одна транзакция на весь список
    with backend_call(db, "отметить посещаемость"):
        for record in payload.records:
            _check_mark(db, current_user.id, record)
        for record in payload.records:
            crud_attendance.mark_attendance(
                db, current_user.id, record.student_id, record.lesson_id, record.date, record.status,
                record.note, commit=False,
            )
        db.commit()
    logger.info(f"Учитель {current_user.id} отметил {len(payload.records)} записей")
    return {"marked": len(payload.records)}


@router.get("/lessons/{lesson_id}/attendance", response_model=List[AttendanceEntity])
def get_lesson_attendance(
    lesson_id: int,
    day: date,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    with backend_call(db, "найти урок"):
        crud_schedule.get_teacher_lesson(db, current_user.id, lesson_id)
    return crud_attendance.get_lesson_attendance(db, lesson_id, day)


@router.get("/excuses", response_model=List[AttendanceEntity])
def get_pending_excuses(db: Session = Depends(get_db), current_user: User = Depends(require_teacher)):
    return crud_attendance.get_pending_excuses_for_teacher(db, current_user.id)


@router.post("/excuses/{attendance_id}/review", response_model=AttendanceEntity)
def review_excuse(
    attendance_id: int,
    review: ExcuseReview,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    return crud_attendance.review_excuse(db, current_user.id, attendance_id, review.status)


# ---------- Оценки ----------

@router.post("/grades", response_model=GradeOut)
def add_grade(
    grade_in: GradeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    return crud_grades.add_grade(db, current_user.id, grade_in)


@router.delete("/grades/{grade_id}")
def delete_grade(grade_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_teacher)):
    crud_grades.delete_grade(db, current_user.id, grade_id)
    return {"message": "Оценка удалена"}


@router.get("/subjects/{subject_id}/averages", response_model=Dict[int, float])
def get_subject_averages(
    subject_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    return crud_grades.get_subject_student_averages(db, current_user.id, subject_id)


# ---------- Задания ----------

@router.post("/assignments", response_model=AssignmentOut)
def create_assignment(
    assignment_in: AssignmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    return crud_assignment.create_assignment(db, current_user.id, assignment_in)


@router.get("/assignments/{assignment_id}/submissions", response_model=List[SubmissionOut])
def get_submissions(
    assignment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    return crud_assignment.get_submissions(db, current_user.id, assignment_id)


@router.post("/submissions/{submission_id}/grade", response_model=SubmissionOut)
def grade_submission(
    submission_id: int,
    grade_in: SubmissionGrade,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    return crud_assignment.grade_submission(db, current_user.id, submission_id, grade_in)
