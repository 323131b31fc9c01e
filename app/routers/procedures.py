"""
Procedure routes.

  POST /procedures                      → create a procedure (no name dedup)
  GET  /procedures                      → all procedures, by name
  GET  /procedures/search               → substring search with category filter
  GET  /procedures/{id}/comparison      → every practice's price, cheapest first
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.catalog import ProcedureCreate, ProcedureResponse
from app.schemas.comparison import ProcedureComparisonResponse
from app.schemas.search import ProcedureSearchParams
from app.services.catalog import records
from app.services.catalog.search import search_procedures
from app.services.comparison.price_comparer import compare_procedure_prices

router = APIRouter(prefix="/procedures", tags=["procedures"])


@router.post("", response_model=ProcedureResponse, status_code=status.HTTP_201_CREATED)
def create_procedure(
    payload: ProcedureCreate,
    db: Session = Depends(get_db),
) -> ProcedureResponse:
    procedure = records.create_procedure(db, payload)
    return ProcedureResponse.model_validate(procedure)


@router.get("", response_model=list[ProcedureResponse])
def list_procedures(db: Session = Depends(get_db)) -> list[ProcedureResponse]:
    return [ProcedureResponse.model_validate(p) for p in records.list_procedures(db)]


# Declared before /{procedure_id}/... so "search" is never read as an id
@router.get("/search", response_model=list[ProcedureResponse])
def search(
    params: Annotated[ProcedureSearchParams, Query()],
    db: Session = Depends(get_db),
) -> list[ProcedureResponse]:
    """An empty result is a normal 200 with an empty list."""
    return [ProcedureResponse.model_validate(p) for p in search_procedures(db, params)]


@router.get("/{procedure_id}/comparison", response_model=ProcedureComparisonResponse)
def get_procedure_comparison(
    procedure_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
) -> ProcedureComparisonResponse:
    """
    404 only when the procedure itself is unknown.
    A known procedure with no prices returns pricing_options=[].
    """
    comparison = compare_procedure_prices(db, procedure_id)
    if comparison is None:
        raise HTTPException(
            status_code=404, detail=f"Procedure with id {procedure_id} not found"
        )
    return ProcedureComparisonResponse.model_validate(comparison)
