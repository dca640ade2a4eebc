# classio/schemas/grade.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class Grade(BaseModel):
    id: int
    subject_id: int
    score: float
    weight: float = 1.0
    description: str = "Grade"
    date: datetime


class SubjectGradeStats(BaseModel):
    subject_id: int
    subject_name: str
    subject_color: int  # ARGB
    average: float
    grades: List[Grade]


class GradeCreate(BaseModel):
    student_id: int
    subject_id: int
    score: float
    weight: float = Field(default=1.0, gt=0)
    grade_type: Optional[str] = None
    comment: Optional[str] = None


class GradeOut(BaseModel):
    id: int
    student_id: int
    subject_id: int
    score: float
    weight: float
    grade_type: Optional[str] = None
    comment: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
