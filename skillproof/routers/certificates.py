from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skillproof.database import get_db
from skillproof.schemas.certificate import (
    GenerateCertificateRequest,
    CertificateOut,
    VerifyCertificateResponse,
    CertificateDownload,
)
from skillproof.services import certificates as certificate_service

router = APIRouter(prefix="/certificates", tags=["Certificates"])


@router.post("/generate", response_model=CertificateOut)
def generate(payload: GenerateCertificateRequest, db: Session = Depends(get_db)):
    return certificate_service.generate_certificate(db, payload.user_skill_id)


@router.get("/user/{user_id}", response_model=List[CertificateOut])
def user_certificates(user_id: int, db: Session = Depends(get_db)):
    return certificate_service.list_user_certificates(db, user_id)


@router.get("/verify/{certificate_number}", response_model=VerifyCertificateResponse)
def verify(certificate_number: str, db: Session = Depends(get_db)):
    """
    Публичная проверка по номеру из QR-кода. Неизвестный или отозванный
    номер означает valid=false, а не ошибку.
    """
    certificate = certificate_service.verify_certificate(db, certificate_number)
    return {"valid": certificate is not None, "certificate": certificate}


@router.get("/{certificate_id}/download", response_model=CertificateDownload)
def download(certificate_id: int, db: Session = Depends(get_db)):
    return certificate_service.prepare_download(db, certificate_id)
