from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from skillproof.database import Base

QUESTION_TYPES = ("multiple_choice", "video_task", "true_false")


class MiniTest(Base):
    """Мини-тест по навыку. Справочные данные (см. utils/test_loader.py)."""
    __tablename__ = "mini_tests"

    id = Column(Integer, primary_key=True, index=True)
    skill_id = Column(Integer, ForeignKey("skills.id"), nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    time_limit = Column(Integer, nullable=True)          # минуты
    passing_score = Column(Integer, nullable=False)      # абсолютный порог в баллах, не процент
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    skill = relationship("Skill", back_populates="tests")
    questions = relationship(
        "TestQuestion",
        back_populates="test",
        order_by="TestQuestion.order_index",
        cascade="all, delete-orphan",
    )


class TestQuestion(Base):
    __tablename__ = "test_questions"

    id = Column(Integer, primary_key=True, index=True)
    test_id = Column(Integer, ForeignKey("mini_tests.id"), nullable=False, index=True)

    question_text = Column(Text, nullable=False)
    question_type = Column(String, nullable=False)       # multiple_choice | video_task | true_false
    options = Column(Text, nullable=True)                # JSON-массив строк
    correct_answer = Column(String, nullable=False)
    points = Column(Integer, nullable=False)
    order_index = Column(Integer, nullable=False)

    test = relationship("MiniTest", back_populates="questions")
