# classio/schemas/invite.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from classio.core.roles import UserRole


class InviteCodeCreate(BaseModel):
    role: UserRole
    usage_limit: int = 1
    class_id: Optional[int] = None
    # Либо точная дата, либо срок в днях, иначе срок по умолчанию
    expires_at: Optional[datetime] = None
    expiry_days: Optional[int] = Field(default=None, gt=0)


class InviteCodeOut(BaseModel):
    code: str
    school_id: int
    role: UserRole
    class_id: Optional[int] = None
    usage_limit: int
    times_used: int
    expires_at: Optional[datetime] = None
    is_active: bool
    created_at: Optional[datetime] = None
    can_redeem: bool
    remaining_uses: int
