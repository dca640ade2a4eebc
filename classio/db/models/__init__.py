from classio.db.base import Base
from classio.db.models.school import School, SchoolClass, ClassStudent
from classio.db.models.user import User, ParentStudent
from classio.db.models.subject import Subject, Lesson
from classio.db.models.attendance import Attendance
from classio.db.models.grade import Grade
from classio.db.models.assignment import Assignment, AssignmentSubmission
from classio.db.models.invite_code import InviteCode

__all__ = [
    "Base",
    "School",
    "SchoolClass",
    "ClassStudent",
    "User",
    "ParentStudent",
    "Subject",
    "Lesson",
    "Attendance",
    "Grade",
    "Assignment",
    "AssignmentSubmission",
    "InviteCode",
]
