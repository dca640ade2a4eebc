from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from classio.schemas.schedule import Subject


class AssignmentCreate(BaseModel):
    subject_id: int
    title: str
    description: Optional[str] = None
    due_date: datetime

class AssignmentOut(BaseModel):
    id: int
    subject_id: int
    teacher_id: int
    title: str
    description: Optional[str] = None
    due_date: datetime
    created_at: datetime

    class Config:
        from_attributes = True

class Assignment(BaseModel):
    id: int
    subject: Subject
    title: str
    description: Optional[str] = None
    due_date: datetime
    is_completed: bool = False

class SubmissionCreate(BaseModel):
    content: Optional[str] = None
    attachment_url: Optional[str] = None

class SubmissionGrade(BaseModel):
    grade: float
    feedback: Optional[str] = None

class SubmissionOut(BaseModel):
    id: int
    assignment_id: int
    student_id: int
    content: Optional[str] = None
    attachment_url: Optional[str] = None
    submitted_at: datetime
    grade: Optional[float] = None
    feedback: Optional[str] = None
    graded_at: Optional[datetime] = None

    class Config:
        from_attributes = True
