"""Shared schema primitives."""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer

CENTS = Decimal("0.01")

# Money travels as a JSON number; pydantic would otherwise emit Decimal as a string.
Money = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


def quantize_money(value: Decimal) -> Decimal:
    """Round to two fraction digits, half-up."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class IDSchema(BaseSchema):
    id: int


class CreatedSchema(IDSchema):
    created_at: datetime


class ErrorDetail(BaseSchema):
    field: str | None = None
    message: str


class ErrorResponse(BaseSchema):
    error: str
    details: list[ErrorDetail] = []
