# classio/crud/user.py
from typing import List, Optional

from sqlalchemy.orm import Session

from classio.core.exceptions import NotFound, ValidationError
from classio.core.roles import UserRole
from classio.core.security import get_password_hash
from classio.crud.errors import backend_call
from classio.crud.invite import redeem_invite_code
from classio.db.models.school import ClassStudent, SchoolClass
from classio.db.models.user import ParentStudent, User
from classio.schemas.user import UserOut


def get_user_by_email(db: Session, email: str):
    with backend_call(db, "найти пользователя"):
        return db.query(User).filter(User.email == email).first()



def create_user(db: Session, user_data, role: UserRole, school_id: Optional[int]) -> User:
    """Создаёт пользователя без commit: регистрация коммитит вместе с погашением кода."""
    db_user = User(
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        role=role,
        school_id=school_id,
    )
    db.add(db_user)
    db.flush()
    return db_user


def get_children(db: Session, parent_id: int) -> List[UserOut]:
    with backend_call(db, "загрузить список детей"):
        rows = (
            db.query(User)
            .join(ParentStudent, ParentStudent.student_id == User.id)
            .filter(ParentStudent.parent_id == parent_id)
            .order_by(User.id)
            .all()
        )
        return [UserOut.model_validate(u) for u in rows]


def get_student_class_id(db: Session, student_id: int) -> Optional[int]:
    with backend_call(db, "найти класс ученика"):
        row = (
            db.query(ClassStudent.class_id)
            .filter(ClassStudent.student_id == student_id)
            .first()
        )
        return row[0] if row else None


def _get_school_user(db: Session, user_id: int, school_id: int, role: UserRole) -> User:
    user = db.query(User).filter(
        User.id == user_id,
        User.school_id == school_id,
        User.role == role,
    ).first()
    if not user:
        raise NotFound(f"Пользователь с ролью {role.value} не найден")
    return user


def enroll_student(db: Session, school_id: int, class_id: int, student_id: int) -> None:
    with backend_call(db, "записать ученика в класс"):
        school_class = db.query(SchoolClass).filter(
            SchoolClass.id == class_id,
            SchoolClass.school_id == school_id,
        ).first()
        if not school_class:
            raise NotFound("Класс не найден")
        _get_school_user(db, student_id, school_id, UserRole.student)

        # Ученик состоит ровно в одном классе
        db.query(ClassStudent).filter(ClassStudent.student_id == student_id).delete()
        db.add(ClassStudent(class_id=class_id, student_id=student_id))
        db.commit()


def link_parent_student(db: Session, school_id: int, parent_id: int, student_id: int) -> None:
    with backend_call(db, "привязать родителя к ученику"):
        _get_school_user(db, parent_id, school_id, UserRole.parent)
        _get_school_user(db, student_id, school_id, UserRole.student)

        existing = db.query(ParentStudent).filter(
            ParentStudent.parent_id == parent_id,
            ParentStudent.student_id == student_id,
        ).first()
        if existing:
            raise ValidationError("Родитель уже привязан к этому ученику")

        db.add(ParentStudent(parent_id=parent_id, student_id=student_id))
        db.commit()


def register_user(db: Session, user_in) -> User:
    """
    Регистрация по коду приглашения.

    Код гасится и пользователь создаётся в одной транзакции: если создать
    пользователя не удалось, использование кода откатывается.
    """
    if get_user_by_email(db, user_in.email):
        raise ValidationError("Email уже зарегистрирован")

    with backend_call(db, "зарегистрировать пользователя"):
        invite = redeem_invite_code(db, user_in.invite_code.strip(), commit=False)
        user = create_user(db, user_in, role=invite.role, school_id=invite.school_id)
        if invite.role == UserRole.student and invite.class_id is not None:
            db.add(ClassStudent(class_id=invite.class_id, student_id=user.id))
        db.commit()
        db.refresh(user)
        return user
