# classio/api/student.py
from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from classio.api.deps import get_db, require_student
from classio.core.clock import today
from classio.crud import assignment as crud_assignment
from classio.crud import attendance as crud_attendance
from classio.crud import grades as crud_grades
from classio.crud import schedule as crud_schedule
from classio.crud import user as crud_user
from classio.db.models.user import User
from classio.schemas.assignment import Assignment, SubmissionCreate, SubmissionOut
from classio.schemas.attendance import AttendanceEntity, AttendanceStats, CalendarDay
from classio.schemas.grade import Grade, SubjectGradeStats
from classio.schemas.schedule import Lesson

router = APIRouter()


@router.get("/attendance", response_model=List[AttendanceEntity])
def get_my_attendance(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    return crud_attendance.get_student_attendance(db, current_user.id, start_date, end_date)


@router.get("/attendance/stats", response_model=AttendanceStats)
def get_my_attendance_stats(
    month: Optional[str] = Query(None, description="YYYY-MM"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    return crud_attendance.get_attendance_stats(db, current_user.id, month, today())


@router.get("/attendance/calendar", response_model=List[CalendarDay])
def get_my_attendance_calendar(
    month: Optional[int] = None,
    year: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    current = today()
    calendar = crud_attendance.get_attendance_calendar(
        db,
        current_user.id,
        month if month is not None else current.month,
        year if year is not None else current.year,
    )
    return [CalendarDay(date=day, status=status.value) for day, status in calendar.items()]


@router.get("/attendance/issues", response_model=List[AttendanceEntity])
def get_my_attendance_issues(
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    return crud_attendance.get_attendance_issues(db, current_user.id, limit)


@router.get("/grades", response_model=List[SubjectGradeStats])
def get_my_grades(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return crud_grades.get_student_grades(db, current_user.id)


@router.get("/grades/recent", response_model=List[Grade])
def get_recent_grades(
    limit: int = Query(5, ge=1, le=50),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    return crud_grades.get_recent_grades(db, current_user.id, limit)


@router.get("/lessons/today", response_model=List[Lesson])
def get_todays_lessons(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    class_id = crud_user.get_student_class_id(db, current_user.id)
    return crud_schedule.get_day_lessons(db, class_id, today())


@router.get("/schedule", response_model=Dict[int, List[Lesson]])
def get_weekly_schedule(
    week_start: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    class_id = crud_user.get_student_class_id(db, current_user.id)
    return crud_schedule.get_week_lessons(db, class_id, week_start or today())


@router.get("/assignments", response_model=List[Assignment])
def get_upcoming_assignments(
    days: int = Query(7, ge=1, le=365),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    class_id = crud_user.get_student_class_id(db, current_user.id)
    return crud_assignment.get_upcoming_assignments(db, current_user.id, class_id, days)


@router.post("/assignments/{assignment_id}/submit", response_model=SubmissionOut)
def submit_assignment(
    assignment_id: int,
    submission_in: SubmissionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    class_id = crud_user.get_student_class_id(db, current_user.id)
    return crud_assignment.submit_assignment(db, current_user.id, class_id, assignment_id, submission_in)
