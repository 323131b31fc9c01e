"""
Single-row catalog operations: create and list practices and procedures,
and create a pricing entry for an existing (procedure, practice) pair.

No deduplication happens here — two create calls with the same name make
two rows. Name-based matching belongs to the bulk importer only.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.catalog import MedicalPractice, MedicalProcedure
from app.models.pricing import ProcedurePricing
from app.schemas.catalog import PracticeCreate, PricingEntryCreate, ProcedureCreate
from app.services.errors import NotFoundError, StoreError

logger = logging.getLogger(__name__)


def create_practice(db: Session, payload: PracticeCreate) -> MedicalPractice:
    practice = MedicalPractice(
        name=payload.name,
        address=payload.address,
        phone=payload.phone,
        email=payload.email,
    )
    _commit_new(db, practice)
    logger.info("Practice created: id=%s name=%r", practice.id, practice.name)
    return practice


def create_procedure(db: Session, payload: ProcedureCreate) -> MedicalProcedure:
    procedure = MedicalProcedure(
        name=payload.name,
        description=payload.description,
        category=payload.category,
    )
    _commit_new(db, procedure)
    logger.info("Procedure created: id=%s name=%r", procedure.id, procedure.name)
    return procedure


def create_pricing_entry(db: Session, payload: PricingEntryCreate) -> ProcedurePricing:
    """
    Insert a price for an existing procedure/practice pair.

    Raises NotFoundError (and writes nothing) when either id is unknown.
    """
    if db.get(MedicalProcedure, payload.procedure_id) is None:
        raise NotFoundError("Procedure", payload.procedure_id)
    if db.get(MedicalPractice, payload.practice_id) is None:
        raise NotFoundError("Practice", payload.practice_id)

    entry = ProcedurePricing(
        procedure_id=payload.procedure_id,
        practice_id=payload.practice_id,
        cost=payload.cost,
        currency=payload.currency,
        notes=payload.notes,
    )
    _commit_new(db, entry)
    logger.info(
        "Pricing entry created: procedure=%s practice=%s cost=%s %s",
        entry.procedure_id,
        entry.practice_id,
        entry.cost,
        entry.currency,
    )
    return entry


def list_practices(db: Session) -> list[MedicalPractice]:
    return db.query(MedicalPractice).order_by(MedicalPractice.name.asc()).all()


def list_procedures(db: Session) -> list[MedicalProcedure]:
    return db.query(MedicalProcedure).order_by(MedicalProcedure.name.asc()).all()


def _commit_new(db: Session, row) -> None:
    """Add, commit and refresh so server defaults (id, created_at) are loaded."""
    db.add(row)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreError(f"Could not save {type(row).__name__}: {exc}") from exc
    db.refresh(row)
