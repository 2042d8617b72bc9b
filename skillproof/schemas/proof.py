from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

UploadStatus = Literal["uploading", "uploaded", "processing", "verified", "rejected"]


class ProofUpload(BaseModel):
    user_id: int
    user_skill_id: int
    file_url: str
    file_type: Literal["image", "video"]
    description: Optional[str] = None


class ProofOut(BaseModel):
    id: int
    user_skill_id: int
    file_url: str
    file_type: Literal["image", "video"]
    description: Optional[str] = None
    upload_status: UploadStatus
    ai_verification_score: Optional[float] = None
    ai_feedback: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProofStatusOut(BaseModel):
    status: str
    progress: int
