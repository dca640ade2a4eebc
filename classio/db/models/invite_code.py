# classio/db/models/invite_code.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Enum, CheckConstraint
from classio.db.base import Base
from classio.core.clock import utcnow
from classio.core.roles import UserRole


class InviteCode(Base):
    __tablename__ = "invite_codes"
    __table_args__ = (CheckConstraint("usage_limit >= 1", name="ck_invite_codes_usage_limit"),)

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String, unique=True, index=True, nullable=False)
    school_id = Column(Integer, ForeignKey("schools.id"), nullable=False, index=True)
    role = Column(Enum(UserRole, name="user_role"), nullable=False)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=True)  # только для учеников
    usage_limit = Column(Integer, default=1, nullable=False)
    times_used = Column(Integer, default=0, nullable=False)
    expires_at = Column(DateTime, nullable=True)
    # Коды не удаляются, только деактивируются
    is_active = Column(Boolean, default=True, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
