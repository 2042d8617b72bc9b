from datetime import datetime
from sqlalchemy import Column, Integer, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from skillproof.database import Base


class TestAttempt(Base):
    __tablename__ = "test_attempts"

    id = Column(Integer, primary_key=True, index=True)
    user_skill_id = Column(Integer, ForeignKey("user_skills.id"), nullable=False, index=True)
    test_id = Column(Integer, ForeignKey("mini_tests.id"), nullable=False, index=True)

    score = Column(Integer, default=0, nullable=False)
    # фиксируется при старте и больше не пересчитывается
    total_points = Column(Integer, nullable=False)
    passed = Column(Boolean, default=False, nullable=False)

    started_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    completed_at = Column(DateTime, nullable=True)       # None, пока попытка открыта

    answers = Column(Text, default="{}", nullable=False)  # JSON {"<question_id>": "<answer>"}

    user_skill = relationship("UserSkill", back_populates="attempts")
    test = relationship("MiniTest")
