"""
Price comparison response — a procedure plus every practice's price for it,
cheapest first, with all minimum-cost entries flagged.
"""

from datetime import datetime
from typing import Optional

from app.schemas.catalog import PracticeResponse, ProcedureResponse
from app.schemas.common import BaseSchema, Money


class PricingOptionResponse(BaseSchema):
    practice: PracticeResponse
    cost: Money
    currency: str
    notes: Optional[str]
    is_lowest_price: bool
    updated_at: datetime


class ProcedureComparisonResponse(BaseSchema):
    procedure: ProcedureResponse
    pricing_options: list[PricingOptionResponse]
