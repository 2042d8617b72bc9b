"""
Rule that connects proofs and tests to UserSkill.is_verified.

A claimed skill counts as verified once it has at least one proof in status
``verified`` and, when its skill has active mini-tests, at least one passed
attempt on one of them. Verification is never revoked here.
"""

from datetime import datetime

from sqlalchemy.orm import Session

from skillproof.models.skill import UserSkill
from skillproof.models.proof import SkillProof
from skillproof.models.testbank import MiniTest
from skillproof.models.attempt import TestAttempt
from skillproof.utils.logger import logger


def has_verified_proof(db: Session, user_skill_id: int) -> bool:
    return db.query(SkillProof.id).filter(
        SkillProof.user_skill_id == user_skill_id,
        SkillProof.upload_status == "verified",
    ).first() is not None


def has_passed_test(db: Session, user_skill: UserSkill) -> bool:
    return (
        db.query(TestAttempt.id)
        .join(MiniTest, TestAttempt.test_id == MiniTest.id)
        .filter(
            TestAttempt.user_skill_id == user_skill.id,
            TestAttempt.passed.is_(True),
            TestAttempt.completed_at.isnot(None),
            MiniTest.skill_id == user_skill.skill_id,
        )
        .first()
    ) is not None


def requires_test(db: Session, skill_id: int) -> bool:
    return db.query(MiniTest.id).filter(
        MiniTest.skill_id == skill_id,
        MiniTest.is_active.is_(True),
    ).first() is not None


def refresh_user_skill_verification(db: Session, user_skill_id: int) -> bool:
    """Re-evaluates the rule and commits the flip. Returns the current flag."""
    user_skill = db.get(UserSkill, user_skill_id)
    if user_skill is None:
        return False
    if user_skill.is_verified:
        return True

    if not has_verified_proof(db, user_skill.id):
        return False
    if requires_test(db, user_skill.skill_id) and not has_passed_test(db, user_skill):
        return False

    user_skill.is_verified = True
    user_skill.verification_date = datetime.utcnow()
    db.commit()
    logger.info(f"User skill {user_skill.id} verified (user={user_skill.user_id}, skill={user_skill.skill_id})")
    return True
