"""
Bulk import payload and result.

The payload nests procedures → practices → price. It is validated in full
before the importer touches the database; unknown keys are rejected.
The practice contact fields also accept their long-form names
(practice_address / practice_phone / practice_email) used by older exports.
"""

from decimal import Decimal
from typing import Optional

from pydantic import AliasChoices, ConfigDict, EmailStr, Field, field_validator

from app.models.pricing import DEFAULT_CURRENCY
from app.schemas.catalog import (
    normalize_cost,
    normalize_currency,
    normalize_optional_text,
)
from app.schemas.common import BaseSchema


class PracticePriceImport(BaseSchema):
    model_config = ConfigDict(from_attributes=True, extra="forbid")

    practice_name: str = Field(..., min_length=1)
    address: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("address", "practice_address")
    )
    phone: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("phone", "practice_phone")
    )
    email: Optional[EmailStr] = Field(
        default=None, validation_alias=AliasChoices("email", "practice_email")
    )
    cost: Decimal = Field(..., gt=0)
    currency: str = Field(default=DEFAULT_CURRENCY, min_length=1)
    notes: Optional[str] = None

    @field_validator("practice_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("practice_name must not be blank")
        return v

    @field_validator("address", "phone", "notes", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return normalize_optional_text(v) if isinstance(v, str) else v

    @field_validator("cost")
    @classmethod
    def round_cost(cls, v: Decimal) -> Decimal:
        return normalize_cost(v)

    @field_validator("currency")
    @classmethod
    def strip_currency(cls, v: str) -> str:
        return normalize_currency(v)


class ProcedureImport(BaseSchema):
    model_config = ConfigDict(from_attributes=True, extra="forbid")

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    practices: list[PracticePriceImport] = Field(default_factory=list)

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


class BulkImportRequest(BaseSchema):
    model_config = ConfigDict(from_attributes=True, extra="forbid")

    procedures: list[ProcedureImport]


class BulkImportResponse(BaseSchema):
    imported_procedures: int
    imported_practices: int
    imported_pricing_entries: int
