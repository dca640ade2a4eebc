# classio/api/deps.py
from typing import Generator

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from classio.core.exceptions import AccessDenied, AuthenticationRequired
from classio.core.query_cache import QueryCache
from classio.core.roles import SCHOOL_MANAGERS, UserRole
from classio.core.security import decode_access_token
from classio.crud import user as crud_user
from classio.crud.parent import ParentRepository
from classio.db.models.user import User
from classio.db.session import SessionLocal

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

# Общий на процесс кэш: список детей родителя и их классы
query_cache = QueryCache()


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    if not token:
        raise AuthenticationRequired()
    payload = decode_access_token(token)
    email = payload.get("sub")
    if not email:
        raise AuthenticationRequired("Не удалось проверить токен")
    user = crud_user.get_user_by_email(db, email)
    if user is None:
        raise AuthenticationRequired("Пользователь не найден")
    return user


def require_roles(*roles: UserRole):
    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise AccessDenied("Недостаточно прав")
        return current_user
    return dependency


require_parent = require_roles(UserRole.parent)
require_student = require_roles(UserRole.student)
require_teacher = require_roles(UserRole.teacher)
require_school_manager = require_roles(*SCHOOL_MANAGERS)


def get_query_cache() -> QueryCache:
    return query_cache


def get_parent_repository(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_parent),
    cache: QueryCache = Depends(get_query_cache),
) -> ParentRepository:
    return ParentRepository(db, current_user.id, cache)
