from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from skillproof.models.user import User
from skillproof.models.skill import Skill, UserSkill
from skillproof.models.proof import SkillProof
from skillproof.models.job import JobListing, JobApplication, EMPLOYMENT_TYPES
from skillproof.utils.error_handler import AlreadyExistsError, InvalidInputError, NotFoundError
from skillproof.utils.logger import logger

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def _verified_skills(db: Session, user_id: int) -> List[Dict[str, Any]]:
    rows = (
        db.query(Skill.name, Skill.category, UserSkill.verification_date)
        .join(UserSkill, UserSkill.skill_id == Skill.id)
        .filter(
            UserSkill.user_id == user_id,
            UserSkill.is_verified.is_(True),
            UserSkill.verification_date.isnot(None),
        )
        .order_by(Skill.name)
        .all()
    )
    return [
        {"skill_name": name, "category": category, "verification_date": verified_at}
        for name, category, verified_at in rows
    ]


def _portfolio_count(db: Session, user_id: int) -> int:
    return (
        db.query(func.count(SkillProof.id))
        .join(UserSkill, SkillProof.user_skill_id == UserSkill.id)
        .filter(UserSkill.user_id == user_id)
        .scalar()
    ) or 0


def _worker_summary(db: Session, user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "full_name": user.full_name,
        "profile_photo": user.profile_photo,
        "location": user.location,
        "rating": user.rating,
        "verified_skills": _verified_skills(db, user.id),
        "portfolio_count": _portfolio_count(db, user.id),
    }


def list_workers(
    db: Session,
    skill_id: Optional[int] = None,
    location: Optional[str] = None,
    min_rating: Optional[float] = None,
    search_query: Optional[str] = None,
    limit: int = DEFAULT_PAGE_SIZE,
    offset: int = 0,
) -> List[Dict[str, Any]]:
    """
    Поиск исполнителей с хотя бы одним подтверждённым навыком.
    Сортировка по рейтингу (сначала высокий), пагинация по уникальным пользователям.
    """
    if min_rating is not None and not 0 <= min_rating <= 5:
        raise InvalidInputError("min_rating must be between 0 and 5", {"min_rating": min_rating})
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise InvalidInputError(f"limit must be between 1 and {MAX_PAGE_SIZE}", {"limit": limit})
    if offset < 0:
        raise InvalidInputError("offset must not be negative", {"offset": offset})

    query = (
        db.query(User)
        .join(UserSkill, UserSkill.user_id == User.id)
        .filter(UserSkill.is_verified.is_(True), UserSkill.verification_date.isnot(None))
    )
    if skill_id is not None:
        query = query.filter(UserSkill.skill_id == skill_id)
    if location:
        query = query.filter(User.location.ilike(f"%{location}%"))
    if min_rating is not None:
        query = query.filter(User.rating >= min_rating)
    if search_query:
        query = query.filter(User.full_name.ilike(f"%{search_query}%"))

    users = (
        query.distinct()
        .order_by(User.rating.desc().nullslast(), User.id)
        .limit(limit)
        .offset(offset)
        .all()
    )
    return [_worker_summary(db, u) for u in users]


def get_worker_profile(db: Session, worker_id: int) -> Dict[str, Any]:
    user = db.get(User, worker_id)
    if not user:
        raise NotFoundError("Worker", worker_id)
    profile = _worker_summary(db, user)
    profile["bio"] = user.bio or ""
    profile["contact_info"] = user.email
    return profile


def create_job_listing(
    db: Session,
    employer_id: int,
    title: str,
    description: str,
    skill_id: int,
    employment_type: str,
    location: Optional[str] = None,
    salary_range: Optional[str] = None,
) -> JobListing:
    if employment_type not in EMPLOYMENT_TYPES:
        raise InvalidInputError(
            f"employment_type must be one of {list(EMPLOYMENT_TYPES)}",
            {"employment_type": employment_type},
        )
    if not db.get(User, employer_id):
        raise NotFoundError("Employer", employer_id)
    if not db.get(Skill, skill_id):
        raise NotFoundError("Skill", skill_id)

    now = datetime.utcnow()
    listing = JobListing(
        employer_id=employer_id,
        title=title,
        description=description,
        skill_id=skill_id,
        location=location,
        salary_range=salary_range,
        employment_type=employment_type,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db.add(listing)
    db.commit()
    db.refresh(listing)
    logger.info(f"Job listing {listing.id} created by employer {employer_id}")
    return listing


def list_job_listings(db: Session, skill_id: Optional[int] = None, location: Optional[str] = None) -> List[JobListing]:
    query = db.query(JobListing).filter(JobListing.is_active.is_(True))
    if skill_id is not None:
        query = query.filter(JobListing.skill_id == skill_id)
    if location:
        query = query.filter(JobListing.location.ilike(f"%{location}%"))
    return query.order_by(JobListing.created_at.desc(), JobListing.id.desc()).all()


def apply_for_job(db: Session, applicant_id: int, job_listing_id: int, message: Optional[str] = None) -> JobApplication:
    if not db.get(User, applicant_id):
        raise NotFoundError("Applicant", applicant_id)
    listing = db.query(JobListing).filter(
        JobListing.id == job_listing_id,
        JobListing.is_active.is_(True),
    ).first()
    if not listing:
        raise NotFoundError("Job listing", job_listing_id)

    duplicate = AlreadyExistsError(
        "Already applied for this job",
        {"job_listing_id": job_listing_id, "applicant_id": applicant_id},
    )
    if db.query(JobApplication.id).filter(
        JobApplication.job_listing_id == job_listing_id,
        JobApplication.applicant_id == applicant_id,
    ).first():
        raise duplicate

    now = datetime.utcnow()
    application = JobApplication(
        job_listing_id=job_listing_id,
        applicant_id=applicant_id,
        status="pending",
        message=message,
        applied_at=now,
        updated_at=now,
    )
    db.add(application)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise duplicate from e
    db.refresh(application)
    return application


def list_job_applications(db: Session, user_id: int, is_employer: bool) -> List[JobApplication]:
    query = db.query(JobApplication)
    if is_employer:
        query = query.join(JobListing, JobApplication.job_listing_id == JobListing.id).filter(
            JobListing.employer_id == user_id
        )
    else:
        query = query.filter(JobApplication.applicant_id == user_id)
    return query.order_by(JobApplication.applied_at.desc(), JobApplication.id.desc()).all()
