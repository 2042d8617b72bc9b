from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from skillproof.database import get_db
from skillproof.schemas.skill import SkillCreate, SkillOut, UserSkillCreate, UserSkillOut
from skillproof.services import skills as skill_service

router = APIRouter(prefix="/skills", tags=["Skills"])


@router.get("/", response_model=List[SkillOut])
def list_skills(db: Session = Depends(get_db)):
    return skill_service.list_skills(db)


@router.get("/search", response_model=List[SkillOut])
def search_skills(q: str = Query("", max_length=100), db: Session = Depends(get_db)):
    return skill_service.search_skills(db, q)


@router.post("/", response_model=SkillOut)
def create_skill(payload: SkillCreate, db: Session = Depends(get_db)):
    return skill_service.create_skill(
        db,
        name=payload.name,
        category=payload.category,
        description=payload.description,
        icon=payload.icon,
    )


@router.post("/user", response_model=UserSkillOut)
def add_user_skill(payload: UserSkillCreate, db: Session = Depends(get_db)):
    return skill_service.add_user_skill(db, payload.user_id, payload.skill_id)


@router.get("/user/{user_id}", response_model=List[UserSkillOut])
def user_skills(user_id: int, db: Session = Depends(get_db)):
    return skill_service.list_user_skills(db, user_id)
