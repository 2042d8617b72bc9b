from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from skillproof.models.skill import Skill, UserSkill
from skillproof.models.user import User
from skillproof.utils.error_handler import AlreadyExistsError, NotFoundError
from skillproof.utils.logger import logger


def list_skills(db: Session) -> List[Skill]:
    return (
        db.query(Skill)
        .filter(Skill.is_active.is_(True))
        .order_by(Skill.category, Skill.name)
        .all()
    )


def search_skills(db: Session, query: str) -> List[Skill]:
    query = (query or "").strip()
    if not query:
        return []
    pattern = f"%{query}%"
    return (
        db.query(Skill)
        .filter(
            Skill.is_active.is_(True),
            or_(
                Skill.name.ilike(pattern),
                Skill.category.ilike(pattern),
                Skill.description.ilike(pattern),
            ),
        )
        .order_by(Skill.name)
        .all()
    )


def create_skill(
    db: Session,
    name: str,
    category: str,
    description: Optional[str] = None,
    icon: Optional[str] = None,
) -> Skill:
    skill = Skill(name=name, category=category, description=description, icon=icon, is_active=True)
    db.add(skill)
    db.commit()
    db.refresh(skill)
    logger.info(f"Skill {skill.id} '{skill.name}' created")
    return skill


def add_user_skill(db: Session, user_id: int, skill_id: int) -> UserSkill:
    if not db.get(User, user_id):
        raise NotFoundError("User", user_id)
    skill = db.query(Skill).filter(Skill.id == skill_id, Skill.is_active.is_(True)).first()
    if not skill:
        raise NotFoundError("Skill", skill_id)

    duplicate = AlreadyExistsError(
        "Skill already added for this user",
        {"user_id": user_id, "skill_id": skill_id},
    )
    if db.query(UserSkill.id).filter(UserSkill.user_id == user_id, UserSkill.skill_id == skill_id).first():
        raise duplicate

    user_skill = UserSkill(user_id=user_id, skill_id=skill_id, is_verified=False)
    db.add(user_skill)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise duplicate from e
    db.refresh(user_skill)
    return user_skill


def list_user_skills(db: Session, user_id: int) -> List[UserSkill]:
    return (
        db.query(UserSkill)
        .filter(UserSkill.user_id == user_id)
        .order_by(UserSkill.id)
        .all()
    )
