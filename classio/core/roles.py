# classio/core/roles.py
"""
Роли пользователей и всё, что к ним привязано для отображения.

Подпись, цвет (ARGB) и иконка роли берутся только из ROLE_INFO.
"""
import enum
from typing import NamedTuple


class UserRole(str, enum.Enum):
    superadmin = "superadmin"
    bigadmin = "bigadmin"
    admin = "admin"
    teacher = "teacher"
    student = "student"
    parent = "parent"

    @classmethod
    def parse(cls, value: str | None) -> "UserRole | None":
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class RoleInfo(NamedTuple):
    label: str
    color: int
    icon: str


ROLE_INFO = {
    UserRole.superadmin: RoleInfo("Super Admin", 0xFF673AB7, "shield"),
    UserRole.bigadmin: RoleInfo("Big Admin", 0xFF3F51B5, "admin_panel_settings"),
    UserRole.admin: RoleInfo("Principal", 0xFF2196F3, "school"),
    UserRole.teacher: RoleInfo("Teacher", 0xFF4CAF50, "person"),
    UserRole.student: RoleInfo("Student", 0xFFFF9800, "backpack"),
    UserRole.parent: RoleInfo("Parent", 0xFF009688, "family_restroom"),
}

# Кто может управлять школой (коды приглашений, классы, расписание)
SCHOOL_MANAGERS = (UserRole.admin, UserRole.bigadmin, UserRole.superadmin)

# Кого может пригласить каждая роль; роль superadmin выдаёт только superadmin
INVITABLE_ROLES = {
    UserRole.superadmin: frozenset(UserRole),
    UserRole.bigadmin: frozenset(UserRole) - {UserRole.superadmin},
    UserRole.admin: frozenset({UserRole.teacher, UserRole.student, UserRole.parent}),
}


UNKNOWN_ROLE = RoleInfo("User", 0xFF9E9E9E, "person_outline")


def role_info(role: UserRole | str | None) -> RoleInfo:
    return ROLE_INFO.get(UserRole.parse(role), UNKNOWN_ROLE)


def can_invite(issuer_role: UserRole | str | None, role: UserRole | str | None) -> bool:
    target = UserRole.parse(role)
    return target is not None and target in INVITABLE_ROLES.get(UserRole.parse(issuer_role), frozenset())
