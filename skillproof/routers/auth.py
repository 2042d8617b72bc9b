from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skillproof.database import get_db
from skillproof.models.user import User
from skillproof.schemas.user import UserCreate, UserResponse, LoginRequest, LoginResponse
from skillproof.services import accounts
from skillproof.utils.auth import get_current_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    return accounts.register_user(
        db,
        full_name=payload.full_name,
        email=payload.email,
        password=payload.password,
        phone=payload.phone,
    )


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user, token = accounts.login_user(db, payload.email, payload.password)
    return {"user": user, "access_token": token, "token_type": "bearer"}


@router.get("/me", response_model=UserResponse)
def get_profile(user: User = Depends(get_current_user)):
    """
    Возвращает профиль пользователя по bearer-токену
    """
    return user


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return accounts.get_user_profile(db, user_id)
