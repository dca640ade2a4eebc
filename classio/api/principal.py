# classio/api/principal.py
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from classio.api.deps import get_db, get_query_cache, require_school_manager
from classio.core.exceptions import AccessDenied, ValidationError
from classio.core.query_cache import QueryCache
from classio.core.roles import UserRole
from classio.crud import invite as crud_invite
from classio.crud import schedule as crud_schedule
from classio.crud import school as crud_school
from classio.crud import user as crud_user
from classio.db.models.user import User
from classio.schemas.invite import InviteCodeCreate, InviteCodeOut
from classio.schemas.schedule import LessonCreate, LessonOut, SubjectCreate, SubjectOut
from classio.schemas.school import ClassCreate, ClassOut, EnrollStudent, SchoolStats
from classio.services.access import children_key

router = APIRouter()


def school_scope(
    school_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_school_manager),
) -> int:
    """Школа, которой управляет пользователь. superadmin указывает её явно."""
    if current_user.role == UserRole.superadmin:
        if school_id is None:
            raise ValidationError("Укажите school_id")
        return crud_school.get_school(db, school_id).id
    if current_user.school_id is None:
        raise AccessDenied("Пользователь не привязан к школе")
    if school_id is not None and school_id != current_user.school_id:
        raise AccessDenied()
    return current_user.school_id


# ---------- Коды приглашений ----------

@router.post("/invite-codes", response_model=InviteCodeOut)
def issue_invite_code(
    data: InviteCodeCreate,
    school_id: int = Depends(school_scope),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_school_manager),
):
    return crud_invite.to_out(
        crud_invite.issue_invite_code(db, school_id, current_user.id, data, issuer_role=current_user.role)
    )


@router.get("/invite-codes", response_model=List[InviteCodeOut])
def get_invite_codes(school_id: int = Depends(school_scope), db: Session = Depends(get_db)):
    return [crud_invite.to_out(code) for code in crud_invite.get_school_invite_codes(db, school_id)]


@router.post("/invite-codes/{code}/deactivate", response_model=InviteCodeOut)
def deactivate_invite_code(code: str, school_id: int = Depends(school_scope), db: Session = Depends(get_db)):
    return crud_invite.to_out(crud_invite.deactivate_invite_code(db, school_id, code))


# ---------- Школа ----------

@router.get("/stats", response_model=SchoolStats)
def get_school_stats(school_id: int = Depends(school_scope), db: Session = Depends(get_db)):
    return crud_school.get_school_stats(db, school_id)


@router.post("/classes", response_model=ClassOut)
def create_class(class_in: ClassCreate, school_id: int = Depends(school_scope), db: Session = Depends(get_db)):
    return crud_school.create_class(db, school_id, class_in)


@router.post("/classes/{class_id}/students")
def enroll_student(
    class_id: int,
    payload: EnrollStudent,
    school_id: int = Depends(school_scope),
    db: Session = Depends(get_db),
):
    crud_user.enroll_student(db, school_id, class_id, payload.student_id)
    return {"message": "Ученик записан в класс"}


@router.post("/subjects", response_model=SubjectOut)
def create_subject(subject_in: SubjectCreate, school_id: int = Depends(school_scope), db: Session = Depends(get_db)):
    return crud_schedule.create_subject(db, school_id, subject_in)


@router.post("/lessons", response_model=LessonOut)
def create_lesson(lesson_in: LessonCreate, school_id: int = Depends(school_scope), db: Session = Depends(get_db)):
    return crud_schedule.create_lesson(db, school_id, lesson_in)


@router.post("/parents/{parent_id}/children/{student_id}")
def link_parent(
    parent_id: int,
    student_id: int,
    school_id: int = Depends(school_scope),
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
):
    crud_user.link_parent_student(db, school_id, parent_id, student_id)
    # Иначе родитель не увидит ребёнка до своего refresh
    cache.invalidate(children_key(parent_id))
    return {"message": "Родитель привязан к ученику"}
