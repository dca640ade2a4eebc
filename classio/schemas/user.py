# classio/schemas/user.py

from pydantic import BaseModel, computed_field
from typing import Optional

from classio.core.roles import UserRole, role_info


class UserCreate(BaseModel):
    email: str
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    invite_code: str

class UserLogin(BaseModel):
    email: str
    password: str

class Token(BaseModel):
    access_token: str
    token_type: str

class UserOut(BaseModel):
    id: int
    email: str
    role: UserRole
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    school_id: Optional[int] = None

    @computed_field
    @property
    def role_label(self) -> str:
        return role_info(self.role).label

    @computed_field
    @property
    def role_color(self) -> int:
        return role_info(self.role).color

    @computed_field
    @property
    def role_icon(self) -> str:
        return role_info(self.role).icon

    class Config:
        from_attributes = True
