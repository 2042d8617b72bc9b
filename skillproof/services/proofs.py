from __future__ import annotations

import math
import random
from datetime import datetime
from typing import Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from skillproof import config
from skillproof.models.skill import UserSkill
from skillproof.models.proof import SkillProof, FILE_TYPES
from skillproof.services.verification import refresh_user_skill_verification
from skillproof.utils.error_handler import NotAuthorizedError, NotFoundError, InvalidInputError
from skillproof.utils.logger import logger

# статус загрузки -> грубый прогресс в процентах
STATUS_PROGRESS: Dict[str, int] = {
    "uploading": 25,
    "uploaded": 50,
    "processing": 75,
    "verified": 100,
    "rejected": 100,
}

VERIFIED_FEEDBACK = [
    "Good technique demonstrated",
    "Clear demonstration of skill proficiency",
    "Professional quality work shown",
    "Adequate skill level displayed",
]
REJECTED_FEEDBACK = [
    "Needs improvement in execution",
    "Technique is not clearly visible in the submitted media",
    "Demonstrated work does not meet the required standard",
]

ScoreSource = Callable[[], float]


def default_score_source() -> float:
    """Заглушка вместо ML-модели: равномерно в [0, 100)."""
    return random.random() * 100


def progress_for_status(status: str) -> int:
    return STATUS_PROGRESS.get(status, 0)


def pick_feedback(score: float, verified: bool) -> str:
    messages = VERIFIED_FEEDBACK if verified else REJECTED_FEEDBACK
    return messages[int(score) % len(messages)]


def submit_proof(
    db: Session,
    user_id: int,
    user_skill_id: int,
    file_url: str,
    file_type: str,
    description: Optional[str] = None,
) -> SkillProof:
    # проверка владельца строго до любой записи
    user_skill = db.query(UserSkill).filter(
        UserSkill.id == user_skill_id,
        UserSkill.user_id == user_id,
    ).first()
    if not user_skill:
        logger.warning(f"Proof upload denied: user {user_id} does not own user skill {user_skill_id}")
        raise NotAuthorizedError("User skill not found or access denied")

    if file_type not in FILE_TYPES:
        raise InvalidInputError(f"file_type must be one of {list(FILE_TYPES)}", {"file_type": file_type})

    now = datetime.utcnow()
    proof = SkillProof(
        user_skill_id=user_skill.id,
        file_url=file_url,
        file_type=file_type,
        description=description,
        upload_status="uploaded",
        created_at=now,
        updated_at=now,
    )
    db.add(proof)
    db.commit()
    db.refresh(proof)
    logger.info(f"Proof {proof.id} uploaded for user skill {user_skill.id}")
    return proof


def list_proofs(db: Session, user_skill_id: int) -> List[SkillProof]:
    return (
        db.query(SkillProof)
        .filter(SkillProof.user_skill_id == user_skill_id)
        .order_by(SkillProof.id)
        .all()
    )


def run_verification(db: Session, proof_id: int, score_source: Optional[ScoreSource] = None) -> SkillProof:
    """
    Симуляция AI-проверки доказательства.

    Балл берётся из score_source (по умолчанию случайный), статус verified при
    исходном балле >= PROOF_PASS_THRESHOLD, иначе rejected. Сохраняется балл,
    усечённый до двух знаков. Балл и отзыв пишутся вместе.
    Повторный запуск перезаписывает результат.
    """
    proof = db.get(SkillProof, proof_id)
    if not proof:
        raise NotFoundError("Skill proof", proof_id)

    draw = score_source or default_score_source
    raw = float(draw())
    verified = raw >= config.PROOF_PASS_THRESHOLD
    # усечение, не округление: сохранённый балл не пересекает порог и остаётся < 100
    score = math.floor(raw * 100) / 100

    proof.upload_status = "verified" if verified else "rejected"
    proof.ai_verification_score = score
    proof.ai_feedback = pick_feedback(score, verified)
    proof.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(proof)
    logger.info(f"Proof {proof.id} {proof.upload_status} with score {score}")

    if verified:
        refresh_user_skill_verification(db, proof.user_skill_id)
        db.refresh(proof)
    return proof


def get_upload_status(db: Session, proof_id: int) -> Dict[str, object]:
    proof = db.get(SkillProof, proof_id)
    if not proof:
        raise NotFoundError("Skill proof", proof_id)
    return {"status": proof.upload_status, "progress": progress_for_status(proof.upload_status)}
