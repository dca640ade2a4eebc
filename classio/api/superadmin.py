# classio/api/superadmin.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from classio.api.deps import get_db, require_roles
from classio.core.roles import UserRole
from classio.crud import invite as crud_invite
from classio.crud import school as crud_school
from classio.db.models.user import User
from classio.schemas.invite import InviteCodeOut
from classio.schemas.school import SchoolCreate, SchoolOut, SchoolWithStats

router = APIRouter()

require_superadmin = require_roles(UserRole.superadmin)


@router.post("/schools", response_model=SchoolOut)
def create_school(
    school_in: SchoolCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_superadmin),
):
    return crud_school.create_school(db, school_in)


@router.get("/schools", response_model=List[SchoolWithStats])
def get_all_schools(db: Session = Depends(get_db), current_user: User = Depends(require_superadmin)):
    return crud_school.get_all_schools(db)


@router.post("/schools/{school_id}/principal-token", response_model=InviteCodeOut)
def create_principal_token(
    school_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_superadmin),
):
    school = crud_school.get_school(db, school_id)
    return crud_invite.to_out(crud_invite.issue_principal_token(db, school.id, current_user.id))
