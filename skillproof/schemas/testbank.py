from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel


class MiniTestOut(BaseModel):
    id: int
    skill_id: int
    title: str
    description: Optional[str] = None
    time_limit: Optional[int] = None
    passing_score: int
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class QuestionOut(BaseModel):
    """Вопрос для прохождения: правильный ответ наружу не отдаём."""
    id: int
    test_id: int
    question_text: str
    question_type: Literal["multiple_choice", "video_task", "true_false"]
    options: Optional[List[str]] = None
    points: int
    order_index: int


class StartTestRequest(BaseModel):
    user_id: int
    user_skill_id: int
    test_id: int


class SubmitTestRequest(BaseModel):
    user_id: int
    attempt_id: int
    answers: Dict[int, str]  # question_id -> ответ


class AttemptOut(BaseModel):
    id: int
    user_skill_id: int
    test_id: int
    score: int
    total_points: int
    passed: bool
    started_at: datetime
    completed_at: Optional[datetime] = None
    answers: Dict[int, str]
