"""
Practice routes.

  POST /practices   → create a practice (no name dedup)
  GET  /practices   → all practices, by name
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.catalog import PracticeCreate, PracticeResponse
from app.services.catalog import records

router = APIRouter(prefix="/practices", tags=["practices"])


@router.post("", response_model=PracticeResponse, status_code=status.HTTP_201_CREATED)
def create_practice(
    payload: PracticeCreate,
    db: Session = Depends(get_db),
) -> PracticeResponse:
    practice = records.create_practice(db, payload)
    return PracticeResponse.model_validate(practice)


@router.get("", response_model=list[PracticeResponse])
def list_practices(db: Session = Depends(get_db)) -> list[PracticeResponse]:
    return [PracticeResponse.model_validate(p) for p in records.list_practices(db)]
