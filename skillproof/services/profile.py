from datetime import datetime
from typing import Any, Dict

from sqlalchemy import func
from sqlalchemy.orm import Session

from skillproof.models.skill import UserSkill
from skillproof.models.proof import SkillProof
from skillproof.models.certificate import Certificate
from skillproof.models.user import User
from skillproof.services.accounts import get_user_profile
from skillproof.utils.error_handler import InvalidInputError

UPDATABLE_FIELDS = ("full_name", "phone", "profile_photo", "location", "bio")


def update_profile(db: Session, user_id: int, **fields: Any) -> User:
    """Частичное обновление: меняются только переданные поля (None тоже значение)."""
    unknown = set(fields) - set(UPDATABLE_FIELDS)
    if unknown:
        raise InvalidInputError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
    if "full_name" in fields and not fields["full_name"]:
        raise InvalidInputError("full_name cannot be empty")

    user = get_user_profile(db, user_id)
    for name, value in fields.items():
        setattr(user, name, value)
    user.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(user)
    return user


def upload_profile_photo(db: Session, user_id: int, file_url: str) -> User:
    return update_profile(db, user_id, profile_photo=file_url)


def get_portfolio(db: Session, user_id: int) -> Dict[str, Any]:
    user = get_user_profile(db, user_id)

    skills = []
    for user_skill in (
        db.query(UserSkill).filter(UserSkill.user_id == user_id).order_by(UserSkill.id).all()
    ):
        proof_count = db.query(func.count(SkillProof.id)).filter(
            SkillProof.user_skill_id == user_skill.id
        ).scalar()
        certificate = user_skill.certificate
        skills.append({
            "skill_name": user_skill.skill.name,
            "category": user_skill.skill.category,
            "is_verified": user_skill.is_verified,
            "proof_count": proof_count or 0,
            "certificate_url": certificate.qr_code if certificate and certificate.is_active else None,
        })

    total_certificates = (
        db.query(func.count(Certificate.id))
        .join(UserSkill, Certificate.user_skill_id == UserSkill.id)
        .filter(UserSkill.user_id == user_id, Certificate.is_active.is_(True))
        .scalar()
    )

    return {"user": user, "skills": skills, "total_certificates": total_certificates or 0}
