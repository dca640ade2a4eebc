# classio/api/parent.py
from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from classio.api.deps import get_parent_repository
from classio.core.clock import today
from classio.crud.parent import ParentRepository
from classio.schemas.assignment import Assignment
from classio.schemas.attendance import AttendanceEntity, AttendanceStats, CalendarDay, ExcuseSubmit
from classio.schemas.grade import SubjectGradeStats
from classio.schemas.schedule import Lesson
from classio.schemas.user import UserOut

router = APIRouter()


@router.get("/children", response_model=List[UserOut])
def get_my_children(repo: ParentRepository = Depends(get_parent_repository)):
    return repo.get_my_children()


@router.post("/refresh")
def refresh(repo: ParentRepository = Depends(get_parent_repository)):
    repo.refresh()
    return {"status": "ok"}


# ---------- Посещаемость ----------

@router.get("/children/{child_id}/attendance", response_model=List[AttendanceEntity])
def get_child_attendance(
    child_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    repo: ParentRepository = Depends(get_parent_repository),
):
    return repo.get_child_attendance(child_id, start_date, end_date)


@router.get("/children/{child_id}/attendance/stats", response_model=AttendanceStats)
def get_child_attendance_stats(
    child_id: int,
    month: Optional[str] = Query(None, description="YYYY-MM, по умолчанию текущий месяц"),
    repo: ParentRepository = Depends(get_parent_repository),
):
    return repo.get_child_attendance_stats(child_id, month)


@router.get("/children/{child_id}/attendance/calendar", response_model=List[CalendarDay])
def get_child_attendance_calendar(
    child_id: int,
    month: Optional[int] = None,
    year: Optional[int] = None,
    repo: ParentRepository = Depends(get_parent_repository),
):
    current = today()
    calendar = repo.get_child_attendance_calendar(
        child_id,
        month if month is not None else current.month,
        year if year is not None else current.year,
    )
    return [CalendarDay(date=day, status=status.value) for day, status in calendar.items()]


@router.get("/children/{child_id}/attendance/issues", response_model=List[AttendanceEntity])
def get_child_attendance_issues(
    child_id: int,
    limit: int = Query(10, ge=1, le=100),
    repo: ParentRepository = Depends(get_parent_repository),
):
    return repo.get_child_attendance_issues(child_id, limit)


# ---------- Оценки ----------

@router.get("/children/{child_id}/grades", response_model=List[SubjectGradeStats])
def get_child_grades(child_id: int, repo: ParentRepository = Depends(get_parent_repository)):
    return repo.get_child_grades(child_id)


@router.get("/children/{child_id}/grades/averages", response_model=Dict[int, float])
def get_child_subject_averages(child_id: int, repo: ParentRepository = Depends(get_parent_repository)):
    return repo.get_child_subject_averages(child_id)


# ---------- Расписание и задания ----------

@router.get("/children/{child_id}/lessons/today", response_model=List[Lesson])
def get_child_todays_lessons(child_id: int, repo: ParentRepository = Depends(get_parent_repository)):
    return repo.get_child_todays_lessons(child_id)


@router.get("/children/{child_id}/schedule", response_model=Dict[int, List[Lesson]])
def get_child_weekly_schedule(
    child_id: int,
    week_start: Optional[date] = None,
    repo: ParentRepository = Depends(get_parent_repository),
):
    return repo.get_child_weekly_schedule(child_id, week_start)


@router.get("/children/{child_id}/assignments", response_model=List[Assignment])
def get_child_assignments(
    child_id: int,
    days: int = Query(7, ge=1, le=365),
    repo: ParentRepository = Depends(get_parent_repository),
):
    return repo.get_child_assignments(child_id, days)


# ---------- Объяснительные ----------

@router.post("/attendance/{attendance_id}/excuse", response_model=AttendanceEntity)
def submit_excuse(
    attendance_id: int,
    excuse: ExcuseSubmit,
    repo: ParentRepository = Depends(get_parent_repository),
):
    return repo.submit_excuse(attendance_id, excuse.excuse_note, excuse.attachment_url)


@router.get("/children/{child_id}/excuses", response_model=List[AttendanceEntity])
def get_child_excuses(
    child_id: int,
    pending_only: bool = False,
    repo: ParentRepository = Depends(get_parent_repository),
):
    if pending_only:
        return repo.get_pending_excuses(child_id)
    return repo.get_all_excuses(child_id)
