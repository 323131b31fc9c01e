"""
ProcedurePricing — the junction between a procedure and a practice,
carrying the price that practice charges.

There is no composite unique constraint on (procedure_id, practice_id), and
no foreign keys: pricing creation checks that both parents exist instead.
The bulk importer keeps one row per pair at the application level; explicit
pricing creation does not deduplicate.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import Index, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, IntegerPrimaryKeyMixin, TimestampMixin

DEFAULT_CURRENCY = "USD"


class ProcedurePricing(Base, IntegerPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "procedure_pricing"
    __table_args__ = (
        Index("procedure_pricing_procedure_idx", "procedure_id"),
        Index("procedure_pricing_practice_idx", "practice_id"),
        Index("procedure_pricing_cost_idx", "cost"),
    )

    procedure_id: Mapped[int] = mapped_column(Integer, nullable=False)
    practice_id: Mapped[int] = mapped_column(Integer, nullable=False)

    # DECIMAL for financial precision — never float
    cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    currency: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=DEFAULT_CURRENCY,
        server_default=DEFAULT_CURRENCY,
        comment="Free-text currency code; not converted when comparing",
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<ProcedurePricing procedure={self.procedure_id} "
            f"practice={self.practice_id} cost={self.cost} {self.currency}>"
        )
