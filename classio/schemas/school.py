# classio/schemas/school.py
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional


class ClassCreate(BaseModel):
    name: str
    head_teacher_id: Optional[int] = None

class ClassOut(BaseModel):
    id: int
    school_id: int
    name: str
    head_teacher_id: Optional[int] = None

    class Config:
        from_attributes = True

class EnrollStudent(BaseModel):
    student_id: int

class SchoolStats(BaseModel):
    total_staff: int = 0
    total_teachers: int = 0
    total_admins: int = 0
    total_classes: int = 0
    total_students: int = 0
    total_parents: int = 0
    active_invite_codes: int = 0

class TeacherStats(BaseModel):
    total_subjects: int = 0
    total_lessons: int = 0
    total_classes: int = 0
    todays_lessons: int = 0
    pending_excuses: int = 0

class SchoolCreate(BaseModel):
    name: str = Field(min_length=1)

class SchoolOut(BaseModel):
    id: int
    name: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class SchoolWithStats(SchoolOut):
    total_users: int = 0
    total_students: int = 0
    total_teachers: int = 0
    total_classes: int = 0
