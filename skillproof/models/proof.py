from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from skillproof.database import Base

FILE_TYPES = ("image", "video")
UPLOAD_STATUSES = ("uploading", "uploaded", "processing", "verified", "rejected")


class SkillProof(Base):
    __tablename__ = "skill_proofs"

    id = Column(Integer, primary_key=True, index=True)
    user_skill_id = Column(Integer, ForeignKey("user_skills.id"), nullable=False, index=True)

    file_url = Column(String, nullable=False)
    file_type = Column(String, nullable=False)          # image | video
    description = Column(Text, nullable=True)
    upload_status = Column(String, default="uploaded", nullable=False)

    # заполняются вместе, только после проверки
    ai_verification_score = Column(Numeric(5, 2, asdecimal=False), nullable=True)
    ai_feedback = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user_skill = relationship("UserSkill", back_populates="proofs")
