from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skillproof.database import get_db
from skillproof.schemas.proof import ProofUpload, ProofOut, ProofStatusOut
from skillproof.services import proofs as proof_service

router = APIRouter(prefix="/proofs", tags=["Proofs"])


@router.post("/", response_model=ProofOut)
def upload_proof(payload: ProofUpload, db: Session = Depends(get_db)):
    return proof_service.submit_proof(
        db,
        user_id=payload.user_id,
        user_skill_id=payload.user_skill_id,
        file_url=payload.file_url,
        file_type=payload.file_type,
        description=payload.description,
    )


@router.get("/user-skill/{user_skill_id}", response_model=List[ProofOut])
def list_proofs(user_skill_id: int, db: Session = Depends(get_db)):
    return proof_service.list_proofs(db, user_skill_id)


@router.post("/{proof_id}/verify", response_model=ProofOut)
def verify_proof(proof_id: int, db: Session = Depends(get_db)):
    """
    Запускает (симулированную) AI-проверку доказательства.
    """
    return proof_service.run_verification(db, proof_id)


@router.get("/{proof_id}/status", response_model=ProofStatusOut)
def upload_status(proof_id: int, db: Session = Depends(get_db)):
    return proof_service.get_upload_status(db, proof_id)
