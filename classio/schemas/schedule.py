# classio/schemas/schedule.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Subject(BaseModel):
    id: int
    name: str
    color: int
    teacher_name: Optional[str] = None


class Lesson(BaseModel):
    id: int
    subject: Subject
    start_time: datetime
    end_time: datetime
    room: str = ""
    status: str = "normal"


class SubjectCreate(BaseModel):
    name: str
    class_id: int
    teacher_id: Optional[int] = None


class SubjectOut(BaseModel):
    id: int
    name: str
    class_id: int
    teacher_id: Optional[int] = None

    class Config:
        from_attributes = True


class LessonCreate(BaseModel):
    subject_id: int
    day_of_week: int  # 0 = воскресенье
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    room: Optional[str] = None


class LessonOut(BaseModel):
    id: int
    subject_id: int
    day_of_week: int
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    room: Optional[str] = None

    class Config:
        from_attributes = True
