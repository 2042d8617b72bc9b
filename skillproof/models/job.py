from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from skillproof.database import Base

EMPLOYMENT_TYPES = ("full_time", "part_time", "contract", "freelance")
APPLICATION_STATUSES = ("pending", "viewed", "contacted", "hired", "rejected")


class JobListing(Base):
    __tablename__ = "job_listings"

    id = Column(Integer, primary_key=True, index=True)
    employer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    skill_id = Column(Integer, ForeignKey("skills.id"), nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String, nullable=True)
    salary_range = Column(String, nullable=True)
    employment_type = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    employer = relationship("User", back_populates="job_listings")
    skill = relationship("Skill")
    applications = relationship("JobApplication", back_populates="job_listing")


class JobApplication(Base):
    __tablename__ = "job_applications"

    id = Column(Integer, primary_key=True, index=True)
    job_listing_id = Column(Integer, ForeignKey("job_listings.id"), nullable=False, index=True)
    applicant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    status = Column(String, default="pending", nullable=False)
    message = Column(Text, nullable=True)

    applied_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    job_listing = relationship("JobListing", back_populates="applications")
    applicant = relationship("User", back_populates="applications")

    __table_args__ = (
        UniqueConstraint("job_listing_id", "applicant_id", name="uq_job_application"),
    )
