"""
Bulk import routes.

  POST /import        → nested JSON payload (procedures → practices → price)
  POST /import/file   → the same data as an uploaded .csv/.tsv/.json file

Both run the BulkImporter in a single transaction: the response counts are
only returned once everything is committed.
"""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.imports import BulkImportRequest, BulkImportResponse
from app.services.ingestion.base import ParseError
from app.services.ingestion.bulk_importer import BulkImporter, ImportSummary
from app.services.ingestion.dispatcher import parse_import_file

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/import", tags=["import"])


@router.post("", response_model=BulkImportResponse)
def bulk_import_data(
    payload: BulkImportRequest,
    db: Session = Depends(get_db),
) -> BulkImportResponse:
    summary = BulkImporter(db).run(payload)
    return _to_response(summary)


@router.post("/file", response_model=BulkImportResponse)
def bulk_import_file(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
) -> BulkImportResponse:
    filename = file.filename or ""
    data = file.file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    try:
        request = parse_import_file(data, filename)
    except ParseError as exc:
        logger.warning("Rejected import file %r: %s", filename, exc)
        raise HTTPException(status_code=400, detail=str(exc))

    summary = BulkImporter(db).run(request)
    return _to_response(summary)


def _to_response(summary: ImportSummary) -> BulkImportResponse:
    return BulkImportResponse(
        imported_procedures=summary.imported_procedures,
        imported_practices=summary.imported_practices,
        imported_pricing_entries=summary.imported_pricing_entries,
    )
