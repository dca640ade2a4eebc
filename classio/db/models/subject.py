# classio/db/models/subject.py
from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from classio.db.base import Base


class Subject(Base):
    __tablename__ = "subjects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False, index=True)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    school_class = relationship("SchoolClass", back_populates="subjects")
    teacher = relationship("User")
    lessons = relationship("Lesson", back_populates="subject")


class Lesson(Base):
    __tablename__ = "lessons"

    id = Column(Integer, primary_key=True, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False, index=True)
    # Как в Postgres EXTRACT(DOW): 0 = воскресенье, 1 = понедельник ... 6 = суббота
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(String, nullable=True)  # "HH:MM"
    end_time = Column(String, nullable=True)
    room = Column(String, nullable=True)

    subject = relationship("Subject", back_populates="lessons")
