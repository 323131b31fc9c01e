"""
Practice, Procedure and PricingEntry schemas — create payloads and
response shapes for the catalog endpoints.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from app.models.pricing import DEFAULT_CURRENCY
from app.schemas.common import BaseSchema, CreatedSchema, Money, quantize_money

# NUMERIC(10, 2) upper bound
MAX_COST = Decimal("100000000")


def normalize_optional_text(value: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace; an all-blank value is stored as NULL."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def normalize_cost(value: Decimal) -> Decimal:
    """Round to cents, then bound-check the rounded value."""
    value = quantize_money(value)
    if value <= 0:
        raise ValueError("cost must be at least 0.01")
    if value >= MAX_COST:
        raise ValueError(f"cost must be less than {MAX_COST}")
    return value


def normalize_currency(value: str) -> str:
    """Free-text code, stored as sent apart from surrounding whitespace."""
    value = value.strip()
    if not value:
        raise ValueError("currency must not be blank")
    return value


# ── Practice ─────────────────────────────────────────────────────────────────


class PracticeCreate(BaseSchema):
    name: str = Field(..., min_length=1)
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    @field_validator("address", "phone", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return normalize_optional_text(v) if isinstance(v, str) else v


class PracticeResponse(CreatedSchema):
    name: str
    address: Optional[str]
    phone: Optional[str]
    email: Optional[str]


# ── Procedure ────────────────────────────────────────────────────────────────


class ProcedureCreate(BaseSchema):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    @field_validator("description", "category", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return normalize_optional_text(v) if isinstance(v, str) else v


class ProcedureResponse(CreatedSchema):
    name: str
    description: Optional[str]
    category: Optional[str]


# ── Pricing ──────────────────────────────────────────────────────────────────


class PricingEntryCreate(BaseSchema):
    procedure_id: int = Field(..., gt=0)
    practice_id: int = Field(..., gt=0)
    cost: Decimal = Field(..., gt=0)
    currency: str = Field(default=DEFAULT_CURRENCY, min_length=1)
    notes: Optional[str] = None

    @field_validator("cost")
    @classmethod
    def round_cost(cls, v: Decimal) -> Decimal:
        return normalize_cost(v)

    @field_validator("currency")
    @classmethod
    def strip_currency(cls, v: str) -> str:
        return normalize_currency(v)

    @field_validator("notes", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return normalize_optional_text(v) if isinstance(v, str) else v


class PricingEntryResponse(CreatedSchema):
    procedure_id: int
    practice_id: int
    cost: Money
    currency: str
    notes: Optional[str]
    updated_at: datetime
