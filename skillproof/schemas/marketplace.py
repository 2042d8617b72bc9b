from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

EmploymentType = Literal["full_time", "part_time", "contract", "freelance"]


class VerifiedSkill(BaseModel):
    skill_name: str
    category: str
    verification_date: datetime


class WorkerOut(BaseModel):
    id: int
    full_name: str
    profile_photo: Optional[str] = None
    location: Optional[str] = None
    rating: Optional[float] = None
    verified_skills: List[VerifiedSkill]
    portfolio_count: int


class WorkerProfileOut(WorkerOut):
    bio: str
    contact_info: str


class JobListingCreate(BaseModel):
    employer_id: int
    title: str = Field(min_length=5)
    description: str = Field(min_length=20)
    skill_id: int
    location: Optional[str] = None
    salary_range: Optional[str] = None
    employment_type: EmploymentType


class JobListingOut(BaseModel):
    id: int
    employer_id: int
    title: str
    description: str
    skill_id: int
    location: Optional[str] = None
    salary_range: Optional[str] = None
    employment_type: EmploymentType
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class JobApplicationCreate(BaseModel):
    applicant_id: int
    job_listing_id: int
    message: Optional[str] = None


class JobApplicationOut(BaseModel):
    id: int
    job_listing_id: int
    applicant_id: int
    status: Literal["pending", "viewed", "contacted", "hired", "rejected"]
    message: Optional[str] = None
    applied_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
