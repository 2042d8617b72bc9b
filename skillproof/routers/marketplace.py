from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from skillproof.database import get_db
from skillproof.schemas.marketplace import (
    WorkerOut,
    WorkerProfileOut,
    JobListingCreate,
    JobListingOut,
    JobApplicationCreate,
    JobApplicationOut,
)
from skillproof.services import marketplace as market

router = APIRouter(prefix="/marketplace", tags=["Marketplace"])


@router.get("/workers", response_model=List[WorkerOut])
def workers(
    skill_id: Optional[int] = None,
    location: Optional[str] = None,
    min_rating: Optional[float] = Query(None, ge=0, le=5),
    search_query: Optional[str] = None,
    limit: int = Query(market.DEFAULT_PAGE_SIZE, ge=1, le=market.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    return market.list_workers(
        db,
        skill_id=skill_id,
        location=location,
        min_rating=min_rating,
        search_query=search_query,
        limit=limit,
        offset=offset,
    )


@router.get("/workers/{worker_id}", response_model=WorkerProfileOut)
def worker_profile(worker_id: int, db: Session = Depends(get_db)):
    return market.get_worker_profile(db, worker_id)


@router.post("/jobs", response_model=JobListingOut)
def create_job(payload: JobListingCreate, db: Session = Depends(get_db)):
    return market.create_job_listing(
        db,
        employer_id=payload.employer_id,
        title=payload.title,
        description=payload.description,
        skill_id=payload.skill_id,
        employment_type=payload.employment_type,
        location=payload.location,
        salary_range=payload.salary_range,
    )


@router.get("/jobs", response_model=List[JobListingOut])
def jobs(skill_id: Optional[int] = None, location: Optional[str] = None, db: Session = Depends(get_db)):
    return market.list_job_listings(db, skill_id=skill_id, location=location)


@router.post("/jobs/apply", response_model=JobApplicationOut)
def apply(payload: JobApplicationCreate, db: Session = Depends(get_db)):
    return market.apply_for_job(db, payload.applicant_id, payload.job_listing_id, payload.message)


@router.get("/applications/{user_id}", response_model=List[JobApplicationOut])
def applications(user_id: int, is_employer: bool = False, db: Session = Depends(get_db)):
    return market.list_job_applications(db, user_id, is_employer)
