# classio/services/invites.py
import logging
import secrets
import string
from datetime import datetime, timedelta
from typing import Optional

from classio.core.clock import to_naive_utc, utcnow
from classio.core.config import settings
from classio.core.exceptions import AccessDenied, ValidationError
from classio.core.roles import UserRole, can_invite

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


def generate_code(length: Optional[int] = None) -> str:
    length = length or settings.INVITE_CODE_LENGTH
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def resolve_expiry(
    expires_at: Optional[datetime] = None,
    expiry_days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> datetime:
    now = now or utcnow()
    if expires_at is not None:
        expires_at = to_naive_utc(expires_at)
        if expires_at <= now:
            raise ValidationError("Срок действия кода уже истёк")
        return expires_at
    if expiry_days is None:
        expiry_days = settings.INVITE_DEFAULT_EXPIRY_DAYS
    return now + timedelta(days=expiry_days)


def validate_issue(issuer_role: UserRole, role: UserRole, usage_limit: int, class_id: Optional[int]) -> Optional[int]:
    """Проверяет параметры кода и возвращает class_id, который надо сохранить."""
    if not can_invite(issuer_role, role):
        logger.warning(f"Роль {UserRole(issuer_role).value} не может приглашать роль {UserRole(role).value}")
        raise AccessDenied("Недостаточно прав для приглашения этой роли")
    if usage_limit < 1:
        raise ValidationError(f"usage_limit должен быть не меньше 1, получено {usage_limit}")
    # Класс имеет смысл только для учеников
    return class_id if role == UserRole.student else None


def can_redeem(code, now: Optional[datetime] = None) -> bool:
    if not code.is_active:
        return False
    if code.times_used >= code.usage_limit:
        return False
    now = to_naive_utc(now) or utcnow()
    expires_at = to_naive_utc(code.expires_at)
    if expires_at is not None and not now < expires_at:
        return False
    return True


def remaining_uses(code) -> int:
    return max(code.usage_limit - code.times_used, 0)
