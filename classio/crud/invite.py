# classio/crud/invite.py
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from classio.core.clock import utcnow
from classio.core.config import settings
from classio.core.exceptions import NotFound, ValidationError
from classio.core.roles import UserRole
from classio.crud.errors import backend_call
from classio.db.models.invite_code import InviteCode
from classio.db.models.school import SchoolClass
from classio.schemas.invite import InviteCodeCreate, InviteCodeOut
from classio.services import invites as invite_service

logger = logging.getLogger(__name__)

# Повторная генерация при совпадении кода (практически не случается)
MAX_CODE_ATTEMPTS = 5


def to_out(code: InviteCode, now: Optional[datetime] = None) -> InviteCodeOut:
    return InviteCodeOut(
        code=code.code,
        school_id=code.school_id,
        role=code.role,
        class_id=code.class_id,
        usage_limit=code.usage_limit,
        times_used=code.times_used,
        expires_at=code.expires_at,
        is_active=code.is_active,
        created_at=code.created_at,
        can_redeem=invite_service.can_redeem(code, now),
        remaining_uses=invite_service.remaining_uses(code),
    )


def issue_invite_code(
    db: Session,
    school_id: int,
    created_by: Optional[int],
    data: InviteCodeCreate,
    *,
    issuer_role: UserRole,
) -> InviteCode:
    class_id = invite_service.validate_issue(issuer_role, data.role, data.usage_limit, data.class_id)
    expires_at = invite_service.resolve_expiry(data.expires_at, data.expiry_days)

    with backend_call(db, "создать код приглашения"):
        if class_id is not None:
            school_class = db.query(SchoolClass).filter(
                SchoolClass.id == class_id,
                SchoolClass.school_id == school_id,
            ).first()
            if not school_class:
                raise NotFound("Класс не найден")

        for attempt in range(MAX_CODE_ATTEMPTS):
            invite = InviteCode(
                code=invite_service.generate_code(),
                school_id=school_id,
                role=data.role,
                class_id=class_id,
                usage_limit=data.usage_limit,
                times_used=0,
                expires_at=expires_at,
                is_active=True,
                created_by=created_by,
            )
            db.add(invite)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                logger.warning(f"Код приглашения совпал с существующим, попытка {attempt + 1}")
                continue
            db.refresh(invite)
            logger.info(
                f"Создан код приглашения: школа={school_id}, роль={data.role.value}, "
                f"лимит={data.usage_limit}, до={expires_at.isoformat()}"
            )
            return invite

    raise ValidationError("Не удалось сгенерировать уникальный код, попробуйте ещё раз")


def issue_principal_token(db: Session, school_id: int, created_by: Optional[int]) -> InviteCode:
    """Одноразовый код директора (bigadmin) для новой школы."""
    data = InviteCodeCreate(
        role=UserRole.bigadmin,
        usage_limit=1,
        expiry_days=settings.PRINCIPAL_TOKEN_EXPIRY_DAYS,
    )
    return issue_invite_code(db, school_id, created_by, data, issuer_role=UserRole.superadmin)


def get_school_invite_codes(db: Session, school_id: int) -> List[InviteCode]:
    with backend_call(db, "загрузить коды приглашений"):
        return (
            db.query(InviteCode)
            .filter(InviteCode.school_id == school_id)
            .order_by(InviteCode.created_at.desc(), InviteCode.id.desc())
            .all()
        )


def get_invite_code(db: Session, code: str) -> Optional[InviteCode]:
    with backend_call(db, "найти код приглашения"):
        return db.query(InviteCode).filter(InviteCode.code == code).first()


def deactivate_invite_code(db: Session, school_id: int, code: str) -> InviteCode:
    """Повторная деактивация не ошибка."""
    with backend_call(db, "деактивировать код приглашения"):
        invite = db.query(InviteCode).filter(
            InviteCode.code == code,
            InviteCode.school_id == school_id,
        ).first()
        if not invite:
            raise NotFound("Код приглашения не найден")
        if invite.is_active:
            invite.is_active = False
            db.commit()
            db.refresh(invite)
            logger.info(f"Код приглашения деактивирован: школа={school_id}")
        return invite


def redeem_invite_code(db: Session, code: str, now: Optional[datetime] = None, commit: bool = True) -> InviteCode:
    """
    Погашает код одним условным UPDATE.

    Проверка лимита и срока стоит в WHERE, поэтому два одновременных
    погашения не могут оба пройти последнее использование.
    """
    now = now or utcnow()
    with backend_call(db, "погасить код приглашения"):
        updated = (
            db.query(InviteCode)
            .filter(
                InviteCode.code == code,
                InviteCode.is_active.is_(True),
                InviteCode.times_used < InviteCode.usage_limit,
                or_(InviteCode.expires_at.is_(None), InviteCode.expires_at > now),
            )
            .update({InviteCode.times_used: InviteCode.times_used + 1}, synchronize_session=False)
        )
        if updated != 1:
            db.rollback()
            logger.warning("Попытка использовать недействительный код приглашения")
            raise ValidationError("Недействительный код приглашения")

        if commit:
            db.commit()
        invite = db.query(InviteCode).filter(InviteCode.code == code).first()
        db.refresh(invite)
        logger.info(f"Код приглашения использован: школа={invite.school_id}, {invite.times_used}/{invite.usage_limit}")
        return invite


def count_active_codes(db: Session, school_id: int, now: Optional[datetime] = None) -> int:
    return sum(1 for code in get_school_invite_codes(db, school_id) if invite_service.can_redeem(code, now))
