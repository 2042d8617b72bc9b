from __future__ import annotations

import base64
import binascii
import json
import re
import secrets
import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from skillproof import config
from skillproof.models.user import User
from skillproof.models.skill import UserSkill
from skillproof.models.certificate import Certificate
from skillproof.utils.error_handler import (
    AlreadyExistsError,
    InvalidInputError,
    NotFoundError,
    NotVerifiedError,
)
from skillproof.utils.logger import logger

_FILENAME_FILLER = re.compile(r"[^a-zA-Z0-9]")


def make_certificate_number() -> str:
    # время в мс + 8 hex-символов; коллизию дополнительно ловит unique-индекс
    return f"CERT-{int(time.time() * 1000)}-{secrets.token_hex(4).upper()}"


def build_qr_payload(certificate_number: str, user_skill_id: int, issued: datetime) -> str:
    data = {
        "cert_num": certificate_number,
        "user_skill_id": user_skill_id,
        "issued": issued.isoformat(),
    }
    return base64.b64encode(json.dumps(data).encode("utf-8")).decode("ascii")


def parse_qr_payload(payload: str) -> Dict[str, Any]:
    """Обратная операция к build_qr_payload, для стороннего верификатора."""
    try:
        data = json.loads(base64.b64decode(payload.encode("ascii"), validate=True).decode("utf-8"))
    except (binascii.Error, ValueError) as e:
        raise InvalidInputError("Malformed certificate QR payload") from e
    if not isinstance(data, dict) or not {"cert_num", "user_skill_id", "issued"} <= data.keys():
        raise InvalidInputError("Certificate QR payload is missing fields")
    return data


def sanitize_for_filename(text: str) -> str:
    return _FILENAME_FILLER.sub("_", text)


def generate_certificate(db: Session, user_skill_id: int) -> Certificate:
    user_skill = db.get(UserSkill, user_skill_id)
    if not user_skill or not user_skill.is_verified:
        raise NotVerifiedError(user_skill_id)

    existing = db.query(Certificate.id).filter(Certificate.user_skill_id == user_skill_id).first()
    if existing:
        raise AlreadyExistsError(
            f"Certificate already exists for user skill {user_skill_id}",
            {"user_skill_id": user_skill_id},
        )

    issued = datetime.utcnow()
    number = make_certificate_number()
    certificate = Certificate(
        user_skill_id=user_skill_id,
        certificate_number=number,
        qr_code=build_qr_payload(number, user_skill_id, issued),
        issued_date=issued,
        is_active=True,
        created_at=issued,
    )
    db.add(certificate)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise AlreadyExistsError(
            f"Certificate already exists for user skill {user_skill_id}",
            {"user_skill_id": user_skill_id},
        ) from e
    db.refresh(certificate)
    logger.info(f"Certificate {number} issued for user skill {user_skill_id}")
    return certificate


def list_user_certificates(db: Session, user_id: int) -> List[Certificate]:
    if not db.get(User, user_id):
        raise NotFoundError("User", user_id)
    return (
        db.query(Certificate)
        .join(UserSkill, Certificate.user_skill_id == UserSkill.id)
        .filter(UserSkill.user_id == user_id, Certificate.is_active.is_(True))
        .order_by(Certificate.issued_date.desc(), Certificate.id.desc())
        .all()
    )


def verify_certificate(db: Session, certificate_number: str) -> Optional[Certificate]:
    """Для сканирования QR третьими лицами: неизвестный или отозванный номер -> None."""
    if not certificate_number:
        return None
    return db.query(Certificate).filter(
        Certificate.certificate_number == certificate_number,
        Certificate.is_active.is_(True),
    ).first()


def prepare_download(db: Session, certificate_id: int) -> Dict[str, str]:
    certificate = db.get(Certificate, certificate_id)
    if not certificate or not certificate.is_active:
        raise NotFoundError("Certificate", certificate_id)

    user_skill = certificate.user_skill
    user_name = sanitize_for_filename(user_skill.user.full_name)
    skill_name = sanitize_for_filename(user_skill.skill.name)

    # рендеринг PDF вне этого сервиса; отдаём ссылку и имя файла
    return {
        "url": f"{config.CERTIFICATE_BASE_URL}/download/{certificate.certificate_number}.pdf",
        "filename": f"{user_name}_{skill_name}_Certificate.pdf",
    }
