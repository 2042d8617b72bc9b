from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from skillproof.database import Base


class Certificate(Base):
    __tablename__ = "certificates"

    id = Column(Integer, primary_key=True, index=True)
    # не больше одного сертификата на связку пользователь-навык
    user_skill_id = Column(Integer, ForeignKey("user_skills.id"), unique=True, nullable=False)

    certificate_number = Column(String, unique=True, index=True, nullable=False)
    qr_code = Column(Text, nullable=False)
    issued_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)  # False = отозван
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user_skill = relationship("UserSkill", back_populates="certificate")
