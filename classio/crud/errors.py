# classio/crud/errors.py
import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from classio.core.exceptions import BackendError

logger = logging.getLogger(__name__)


@contextmanager
def backend_call(db: Session, action: str):
    """Любая ошибка БД → откат сессии и BackendError с описанием действия."""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Ошибка БД: не удалось {action}")
        raise BackendError(f"Не удалось {action}", code=type(e).__name__, original_error=e) from e
