from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skillproof.database import get_db
from skillproof.schemas.user import ProfileUpdate, ProfilePhotoUpload, UserResponse, PortfolioResponse
from skillproof.services import profile as profile_service

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.patch("/{user_id}", response_model=UserResponse)
def update_profile(user_id: int, payload: ProfileUpdate, db: Session = Depends(get_db)):
    # только явно переданные поля
    return profile_service.update_profile(db, user_id, **payload.model_dump(exclude_unset=True))


@router.post("/{user_id}/photo", response_model=UserResponse)
def upload_photo(user_id: int, payload: ProfilePhotoUpload, db: Session = Depends(get_db)):
    return profile_service.upload_profile_photo(db, user_id, payload.file_url)


@router.get("/{user_id}/portfolio", response_model=PortfolioResponse)
def portfolio(user_id: int, db: Session = Depends(get_db)):
    return profile_service.get_portfolio(db, user_id)
