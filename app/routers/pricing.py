"""
Pricing routes.

  POST /pricing   → record a practice's price for a procedure
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.catalog import PricingEntryCreate, PricingEntryResponse
from app.services.catalog import records
from app.services.errors import NotFoundError

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.post("", response_model=PricingEntryResponse, status_code=status.HTTP_201_CREATED)
def create_pricing_entry(
    payload: PricingEntryCreate,
    db: Session = Depends(get_db),
) -> PricingEntryResponse:
    """Both the procedure and the practice must already exist (404 otherwise)."""
    try:
        entry = records.create_pricing_entry(db, payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return PricingEntryResponse.model_validate(entry)
