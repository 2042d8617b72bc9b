from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SkillCreate(BaseModel):
    name: str = Field(min_length=2)
    category: str
    description: Optional[str] = None
    icon: Optional[str] = None


class SkillOut(BaseModel):
    id: int
    name: str
    category: str
    description: Optional[str] = None
    icon: Optional[str] = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class UserSkillCreate(BaseModel):
    user_id: int
    skill_id: int


class UserSkillOut(BaseModel):
    id: int
    user_id: int
    skill_id: int
    is_verified: bool
    verification_date: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
