# classio/db/models/user.py
from sqlalchemy import Column, Integer, String, Enum, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from classio.db.base import Base
from classio.core.clock import utcnow
from classio.core.roles import UserRole


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(UserRole, name="user_role"), nullable=False)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    school_id = Column(Integer, ForeignKey("schools.id"), nullable=True)  # None у superadmin
    created_at = Column(DateTime, default=utcnow, nullable=False)

    attendance_records = relationship(
        "Attendance", back_populates="student", foreign_keys="Attendance.student_id"
    )

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class ParentStudent(Base):
    __tablename__ = "parent_student"
    __table_args__ = (UniqueConstraint("parent_id", "student_id"),)

    id = Column(Integer, primary_key=True, index=True)
    parent_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    student = relationship("User", foreign_keys=[student_id])
