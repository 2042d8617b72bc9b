from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field


class UserCreate(BaseModel):
    full_name: str = Field(min_length=2)
    email: EmailStr
    phone: Optional[str] = None
    password: str = Field(min_length=6)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    id: int
    full_name: str
    email: str
    phone: Optional[str] = None
    profile_photo: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    rating: Optional[float] = None
    is_verified: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    user: UserResponse
    access_token: str
    token_type: str = "bearer"


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(default=None, min_length=2)
    phone: Optional[str] = None
    profile_photo: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None


class ProfilePhotoUpload(BaseModel):
    file_url: str


class PortfolioSkill(BaseModel):
    skill_name: str
    category: str
    is_verified: bool
    proof_count: int
    certificate_url: Optional[str] = None


class PortfolioResponse(BaseModel):
    user: UserResponse
    skills: List[PortfolioSkill]
    total_certificates: int
