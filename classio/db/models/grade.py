# classio/db/models/grade.py
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from classio.db.base import Base
from classio.core.clock import utcnow


class Grade(Base):
    __tablename__ = "grades"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False, index=True)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    score = Column(Float, nullable=False)
    weight = Column(Float, default=1.0, nullable=False)
    grade_type = Column(String, nullable=True)  # "test", "homework", ...
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    subject = relationship("Subject")
