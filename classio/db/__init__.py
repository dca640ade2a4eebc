# classio/db/__init__.py
# Этот файл гарантирует, что все модели импортированы при первом импорте classio.db

from classio.db.base import Base
from classio.db.models import (
    School,
    User,
    SchoolClass,
    ClassStudent,
    ParentStudent,
    Subject,
    Lesson,
    Attendance,
    Grade,
    Assignment,
    AssignmentSubmission,
    InviteCode,
)

# Экспортируем Base и модели наружу
__all__ = [
    "Base",
    "School",
    "User",
    "SchoolClass",
    "ClassStudent",
    "ParentStudent",
    "Subject",
    "Lesson",
    "Attendance",
    "Grade",
    "Assignment",
    "AssignmentSubmission",
    "InviteCode",
]
