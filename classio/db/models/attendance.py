# classio/db/models/attendance.py
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from classio.db.base import Base


class Attendance(Base):
    __tablename__ = "attendance"
    __table_args__ = (UniqueConstraint("student_id", "lesson_id", "date"),)

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    lesson_id = Column(Integer, ForeignKey("lessons.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)

    # Статус посещения:
    # "present": присутствовал
    # "absent": отсутствовал
    # "late": опоздал
    # "left_early": ушёл раньше
    # "excused": отсутствовал по уважительной причине
    status = Column(String, nullable=True)
    note = Column(Text, nullable=True)

    # Объяснительная от родителя: none → pending → approved/rejected
    excuse_note = Column(Text, nullable=True)
    excuse_status = Column(String, default="none", nullable=False)
    excuse_attachment_url = Column(String, nullable=True)

    recorded_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    recorded_at = Column(DateTime, nullable=True)

    student = relationship("User", back_populates="attendance_records", foreign_keys=[student_id])
    lesson = relationship("Lesson")
