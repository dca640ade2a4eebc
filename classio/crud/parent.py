# classio/crud/parent.py
import logging
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from classio.core.clock import today
from classio.core.exceptions import AccessDenied, NotFound
from classio.core.query_cache import QueryCache
from classio.core.statuses import DailyAttendanceStatus
from classio.crud import assignment as crud_assignment
from classio.crud import attendance as crud_attendance
from classio.crud import grades as crud_grades
from classio.crud import schedule as crud_schedule
from classio.crud import user as crud_user
from classio.schemas.assignment import Assignment
from classio.schemas.attendance import AttendanceEntity, AttendanceStats
from classio.schemas.grade import SubjectGradeStats
from classio.schemas.schedule import Lesson
from classio.schemas.user import UserOut
from classio.services.access import ChildAccessGuard, child_class_key, children_key

logger = logging.getLogger(__name__)


class ParentRepository:
    """
    Данные детей текущего родителя.

    Каждый метод с child_id сначала проверяет, что ребёнок принадлежит
    родителю. Список детей и классы детей живут в общем кэше до refresh().
    """

    def __init__(self, db: Session, parent_id: int, cache: QueryCache):
        self.db = db
        self.parent_id = parent_id
        self.cache = cache
        self.guard = ChildAccessGuard(cache)

    # ============== Дети ==============

    def get_my_children(self) -> List[UserOut]:
        return self.guard.children(self.parent_id, self._load_children)

    def _load_children(self):
        return crud_user.get_children(self.db, self.parent_id)

    def verify_child(self, child_id: int) -> None:
        self.guard.verify_child_access(self.parent_id, child_id, self._load_children)

    def _child_class_id(self, child_id: int) -> Optional[int]:
        return self.cache.get_or_load(
            child_class_key(self.parent_id, child_id),
            lambda: crud_user.get_student_class_id(self.db, child_id),
            depends_on=[children_key(self.parent_id)],
        )

    def refresh(self) -> None:
        self.guard.refresh(self.parent_id)
        logger.info(f"Кэш детей родителя {self.parent_id} сброшен")

    # ============== Посещаемость ==============

    def get_child_attendance(
        self,
        child_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[AttendanceEntity]:
        self.verify_child(child_id)
        return crud_attendance.get_student_attendance(self.db, child_id, start_date, end_date)

    def get_child_attendance_stats(self, child_id: int, month: Optional[str]) -> AttendanceStats:
        self.verify_child(child_id)
        return crud_attendance.get_attendance_stats(self.db, child_id, month, today())

    def get_child_attendance_calendar(self, child_id: int, month: int, year: int) -> Dict[date, DailyAttendanceStatus]:
        self.verify_child(child_id)
        return crud_attendance.get_attendance_calendar(self.db, child_id, month, year)

    def get_child_attendance_issues(self, child_id: int, limit: int = 10) -> List[AttendanceEntity]:
        self.verify_child(child_id)
        return crud_attendance.get_attendance_issues(self.db, child_id, limit)

    # ============== Оценки ==============

    def get_child_grades(self, child_id: int) -> List[SubjectGradeStats]:
        self.verify_child(child_id)
        return crud_grades.get_student_grades(self.db, child_id)

    def get_child_subject_averages(self, child_id: int) -> Dict[int, float]:
        return {s.subject_id: s.average for s in self.get_child_grades(child_id)}

    # ============== Расписание ==============

    def get_child_todays_lessons(self, child_id: int) -> List[Lesson]:
        self.verify_child(child_id)
        return crud_schedule.get_day_lessons(self.db, self._child_class_id(child_id), today())

    def get_child_weekly_schedule(self, child_id: int, week_start: Optional[date] = None) -> Dict[int, List[Lesson]]:
        self.verify_child(child_id)
        return crud_schedule.get_week_lessons(self.db, self._child_class_id(child_id), week_start or today())

    # ============== Задания ==============

    def get_child_assignments(self, child_id: int, days: int = 7) -> List[Assignment]:
        self.verify_child(child_id)
        return crud_assignment.get_upcoming_assignments(self.db, child_id, self._child_class_id(child_id), days)

    # ============== Объяснительные ==============

    def submit_excuse(self, attendance_id: int, excuse_note: str, attachment_url: Optional[str] = None) -> AttendanceEntity:
        try:
            student_id = crud_attendance.get_attendance_student_id(self.db, attendance_id)
        except NotFound:
            # Для родителя "нет записи" и "запись чужого ребёнка" неотличимы
            raise AccessDenied()
        self.verify_child(student_id)
        return crud_attendance.submit_excuse(self.db, attendance_id, excuse_note, attachment_url)

    def get_pending_excuses(self, child_id: int) -> List[AttendanceEntity]:
        self.verify_child(child_id)
        return crud_attendance.get_excuses(self.db, child_id, pending_only=True)

    def get_all_excuses(self, child_id: int) -> List[AttendanceEntity]:
        self.verify_child(child_id)
        return crud_attendance.get_excuses(self.db, child_id)
