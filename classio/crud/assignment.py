# classio/crud/assignment.py
import logging
from datetime import timedelta
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from classio.core.clock import to_naive_utc, utcnow
from classio.core.exceptions import NotFound, ValidationError
from classio.crud.errors import backend_call
from classio.crud.grades import get_teacher_subject
from classio.db.models.assignment import Assignment as AssignmentModel, AssignmentSubmission
from classio.db.models.subject import Subject as SubjectModel
from classio.schemas.assignment import Assignment, AssignmentCreate, SubmissionCreate, SubmissionGrade
from classio.schemas.schedule import Subject
from classio.services.grades import subject_color
from classio.services.schedule import teacher_name

logger = logging.getLogger(__name__)


def _to_assignment(row: AssignmentModel, completed: set) -> Assignment:
    subject = row.subject
    teacher = subject.teacher
    return Assignment(
        id=row.id,
        subject=Subject(
            id=subject.id,
            name=subject.name,
            color=subject_color(subject.id),
            teacher_name=teacher_name(teacher.first_name, teacher.last_name) if teacher else None,
        ),
        title=row.title or "Untitled Assignment",
        description=row.description,
        due_date=row.due_date,
        is_completed=row.id in completed,
    )


def get_upcoming_assignments(db: Session, student_id: int, class_id: Optional[int], days: int = 7) -> List[Assignment]:
    """Задания класса со сроком в ближайшие days дней; сданные отмечены is_completed."""
    if class_id is None:
        return []
    now = utcnow()
    cutoff = now + timedelta(days=days)

    with backend_call(db, "загрузить задания"):
        rows = (
            db.query(AssignmentModel)
            .join(SubjectModel, AssignmentModel.subject_id == SubjectModel.id)
            .options(joinedload(AssignmentModel.subject).joinedload(SubjectModel.teacher))
            .filter(
                SubjectModel.class_id == class_id,
                AssignmentModel.due_date >= now,
                AssignmentModel.due_date <= cutoff,
            )
            .order_by(AssignmentModel.due_date.asc())
            .all()
        )
        if not rows:
            return []
        completed = {
            assignment_id
            for (assignment_id,) in db.query(AssignmentSubmission.assignment_id).filter(
                AssignmentSubmission.student_id == student_id,
                AssignmentSubmission.assignment_id.in_([r.id for r in rows]),
            )
        }
        return [_to_assignment(r, completed) for r in rows]


def create_assignment(db: Session, teacher_id: int, assignment_in: AssignmentCreate) -> AssignmentModel:
    with backend_call(db, "создать задание"):
        get_teacher_subject(db, teacher_id, assignment_in.subject_id)
        assignment = AssignmentModel(
            subject_id=assignment_in.subject_id,
            teacher_id=teacher_id,
            title=assignment_in.title,
            description=assignment_in.description,
            due_date=to_naive_utc(assignment_in.due_date),
        )
        db.add(assignment)
        db.commit()
        db.refresh(assignment)
        return assignment


def get_submissions(db: Session, teacher_id: int, assignment_id: int) -> List[AssignmentSubmission]:
    with backend_call(db, "загрузить сданные работы"):
        assignment = db.query(AssignmentModel).filter(
            AssignmentModel.id == assignment_id,
            AssignmentModel.teacher_id == teacher_id,
        ).first()
        if not assignment:
            raise NotFound("Задание не найдено")
        return (
            db.query(AssignmentSubmission)
            .filter(AssignmentSubmission.assignment_id == assignment_id)
            .order_by(AssignmentSubmission.submitted_at.desc())
            .all()
        )


def grade_submission(db: Session, teacher_id: int, submission_id: int, grade_in: SubmissionGrade) -> AssignmentSubmission:
    with backend_call(db, "оценить работу"):
        submission = (
            db.query(AssignmentSubmission)
            .join(AssignmentModel, AssignmentSubmission.assignment_id == AssignmentModel.id)
            .filter(AssignmentSubmission.id == submission_id, AssignmentModel.teacher_id == teacher_id)
            .first()
        )
        if not submission:
            raise NotFound("Работа не найдена")
        submission.grade = grade_in.grade
        submission.feedback = grade_in.feedback
        submission.graded_at = utcnow()
        db.commit()
        db.refresh(submission)
        return submission


def submit_assignment(
    db: Session,
    student_id: int,
    class_id: Optional[int],
    assignment_id: int,
    submission_in: SubmissionCreate,
) -> AssignmentSubmission:
    if not (submission_in.content or submission_in.attachment_url):
        raise ValidationError("Пустая работа: нужен текст или вложение")

    with backend_call(db, "сдать задание"):
        assignment = (
            db.query(AssignmentModel)
            .join(SubjectModel, AssignmentModel.subject_id == SubjectModel.id)
            .filter(AssignmentModel.id == assignment_id, SubjectModel.class_id == class_id)
            .first()
        )
        if not assignment:
            raise NotFound("Задание не найдено")

        # Повторная сдача перезаписывает работу и сбрасывает проверку
        submission = db.query(AssignmentSubmission).filter(
            AssignmentSubmission.assignment_id == assignment_id,
            AssignmentSubmission.student_id == student_id,
        ).first()
        if submission is None:
            submission = AssignmentSubmission(assignment_id=assignment_id, student_id=student_id)
            db.add(submission)
        submission.content = submission_in.content
        submission.attachment_url = submission_in.attachment_url
        submission.submitted_at = utcnow()
        submission.grade = None
        submission.feedback = None
        submission.graded_at = None

        db.commit()
        db.refresh(submission)
        logger.info(f"Ученик {student_id} сдал задание {assignment_id}")
        return submission
