"""
Price Comparison Engine — every practice's price for one procedure,
cheapest first.

Lowest-price rule:
  The minimum is taken over the raw numeric cost. Currency is ignored —
  120 EUR and 120 USD tie, and no conversion is attempted. Every entry
  equal to the minimum is flagged, so ties produce several lowest prices.

Ordering:
  Ascending cost. The sort is stable, so equal costs keep the order the
  rows were loaded in (pricing entry id).

rank_pricing_options() is a pure function over loaded rows so the ranking
can be tested without a database; compare_procedure_prices() does the I/O.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from app.models.catalog import MedicalPractice, MedicalProcedure
from app.models.pricing import ProcedurePricing

logger = logging.getLogger(__name__)


@dataclass
class PricingOption:
    """One practice's price for the compared procedure."""

    practice: MedicalPractice
    cost: Decimal
    currency: str
    notes: Optional[str]
    updated_at: datetime
    is_lowest_price: bool = False


@dataclass
class ProcedureComparison:
    procedure: MedicalProcedure
    pricing_options: list[PricingOption] = field(default_factory=list)


def rank_pricing_options(
    rows: Iterable[tuple[ProcedurePricing, MedicalPractice]],
) -> list[PricingOption]:
    """
    Sort (pricing, practice) pairs by cost and flag every minimum-cost entry.
    An empty input gives an empty list.
    """
    options = [
        PricingOption(
            practice=practice,
            cost=Decimal(pricing.cost),
            currency=pricing.currency,
            notes=pricing.notes,
            updated_at=pricing.updated_at,
        )
        for pricing, practice in rows
    ]
    if not options:
        return options

    options.sort(key=lambda o: o.cost)
    lowest = options[0].cost
    for option in options:
        option.is_lowest_price = option.cost == lowest
    return options


def compare_procedure_prices(
    db: Session, procedure_id: int
) -> Optional[ProcedureComparison]:
    """
    Returns None when the procedure does not exist.
    A procedure with no prices yet returns an empty pricing_options list.
    """
    procedure = db.get(MedicalProcedure, procedure_id)
    if procedure is None:
        return None

    rows = (
        db.query(ProcedurePricing, MedicalPractice)
        .join(MedicalPractice, ProcedurePricing.practice_id == MedicalPractice.id)
        .filter(ProcedurePricing.procedure_id == procedure_id)
        .order_by(ProcedurePricing.id.asc())
        .all()
    )
    options = rank_pricing_options(rows)
    logger.debug(
        "Comparison for procedure %s: %d options, %d at lowest price",
        procedure_id,
        len(options),
        sum(1 for o in options if o.is_lowest_price),
    )
    return ProcedureComparison(procedure=procedure, pricing_options=options)
