"""Query-string model for procedure search."""

from typing import Optional

from pydantic import Field, field_validator

from app.schemas.catalog import normalize_optional_text
from app.schemas.common import BaseSchema

DEFAULT_MAX_RESULTS = 50


class ProcedureSearchParams(BaseSchema):
    """
    GET /procedures/search?query=knee&category=Orthopedic&max_results=20

    query is matched as a case-insensitive substring of the procedure name;
    category, when given, must match exactly.
    """

    query: str = Field(..., min_length=1)
    category: Optional[str] = None
    max_results: int = Field(default=DEFAULT_MAX_RESULTS, gt=0)

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("query must contain at least one non-space character")
        return v

    @field_validator("category", mode="before")
    @classmethod
    def blank_category_is_no_filter(cls, v):
        return normalize_optional_text(v) if isinstance(v, str) else v
