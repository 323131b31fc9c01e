"""
Bulk Importer — upserts a nested procedures → practices → prices batch.

Per procedure record, in input order:
  1. Resolve the procedure by exact name; create it if absent. An existing
     procedure keeps its stored description/category.
  2. For each practice record, in order:
       a. Resolve the practice by exact name; create it if absent. An
          existing practice keeps its stored address/phone/email.
       b. Resolve the price by (procedure_id, practice_id). Create it if
          absent, otherwise overwrite cost/currency/notes and refresh
          updated_at. Both cases count as one imported pricing entry.

Transaction:
  The whole batch runs in the caller's session and is committed once at the
  end. Any database error rolls everything back and surfaces as StoreError;
  no partial batch is ever visible.

Known race:
  Neither names nor (procedure, practice) pairs carry a unique constraint.
  Two imports running concurrently that both introduce the same new name
  can each create a row. Within a single batch, created rows are flushed
  immediately so repeated names resolve to the same row.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.catalog import MedicalPractice, MedicalProcedure
from app.models.pricing import ProcedurePricing
from app.schemas.imports import BulkImportRequest, PracticePriceImport
from app.services.errors import StoreError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


@dataclass
class ImportSummary:
    imported_procedures: int = 0
    imported_practices: int = 0
    imported_pricing_entries: int = 0


def resolve_or_create(
    db: Session,
    model: type[ModelT],
    key: dict[str, Any],
    values: Optional[dict[str, Any]] = None,
) -> tuple[ModelT, bool]:
    """
    Look up a row by its key columns; create and flush one on a miss.

    values only apply to a newly created row — an existing row is returned
    untouched. When duplicates exist the lowest id wins.
    Returns (row, created).
    """
    existing = db.query(model).filter_by(**key).order_by(model.id.asc()).first()
    if existing is not None:
        return existing, False

    row = model(**key, **(values or {}))
    db.add(row)
    db.flush()  # assigns the id and makes the row visible to later lookups
    return row, True


class BulkImporter:
    """
    Usage:
        importer = BulkImporter(db)
        summary = importer.run(request)
    """

    def __init__(self, db: Session):
        self.db = db

    def run(self, request: BulkImportRequest) -> ImportSummary:
        summary = ImportSummary()
        try:
            for record in request.procedures:
                procedure, created = resolve_or_create(
                    self.db,
                    MedicalProcedure,
                    {"name": record.name},
                    {"description": record.description, "category": record.category},
                )
                if created:
                    summary.imported_procedures += 1

                for offer in record.practices:
                    practice, created = resolve_or_create(
                        self.db,
                        MedicalPractice,
                        {"name": offer.practice_name},
                        {
                            "address": offer.address,
                            "phone": offer.phone,
                            "email": offer.email,
                        },
                    )
                    if created:
                        summary.imported_practices += 1

                    self._upsert_price(procedure, practice, offer)
                    summary.imported_pricing_entries += 1

            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Bulk import rolled back: %s", exc, exc_info=True)
            raise StoreError(f"Bulk import failed; no changes were applied: {exc}") from exc

        logger.info(
            "Bulk import complete: %d procedures, %d practices, %d pricing entries",
            summary.imported_procedures,
            summary.imported_practices,
            summary.imported_pricing_entries,
        )
        return summary

    # ── Private helpers ───────────────────────────────────────────────────────

    def _upsert_price(
        self,
        procedure: MedicalProcedure,
        practice: MedicalPractice,
        offer: PracticePriceImport,
    ) -> ProcedurePricing:
        price_values = {
            "cost": offer.cost,
            "currency": offer.currency,
            "notes": offer.notes,
        }
        entry, created = resolve_or_create(
            self.db,
            ProcedurePricing,
            {"procedure_id": procedure.id, "practice_id": practice.id},
            price_values,
        )
        if not created:
            for attr, value in price_values.items():
                setattr(entry, attr, value)
            # Always dirty, so the UPDATE is issued even when the price is unchanged
            entry.updated_at = func.now()
            self.db.flush()
        return entry
