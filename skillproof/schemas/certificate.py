from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class GenerateCertificateRequest(BaseModel):
    user_skill_id: int


class CertificateOut(BaseModel):
    id: int
    user_skill_id: int
    certificate_number: str
    qr_code: str
    issued_date: datetime
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class VerifyCertificateResponse(BaseModel):
    valid: bool
    certificate: Optional[CertificateOut] = None


class CertificateDownload(BaseModel):
    url: str
    filename: str
