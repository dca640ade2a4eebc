from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from classio.api.deps import get_db, get_current_user
from classio.core.exceptions import AuthenticationRequired
from classio.db.models.user import User
from classio.schemas.user import UserCreate, UserLogin, Token, UserOut
from classio.crud import user as crud_user
from classio.core.security import verify_password, create_user_token

router = APIRouter()


@router.post("/register", response_model=Token)
def register(user_in: UserCreate, db: Session = Depends(get_db)):
    # Роль и школа берутся из кода приглашения
    user = crud_user.register_user(db, user_in)
    access_token = create_user_token(user)
    return {"access_token": access_token, "token_type": "bearer"}


@router.post("/login", response_model=Token)
def login(form: UserLogin, db: Session = Depends(get_db)):
    user = crud_user.get_user_by_email(db, form.email)
    if not user or not verify_password(form.password, user.hashed_password):
        raise AuthenticationRequired("Неверный email или пароль")
    access_token = create_user_token(user)
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user
