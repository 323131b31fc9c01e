"""
Ingestion abstractions — the BaseParser interface for import files.

Every parser turns raw file bytes into a validated BulkImportRequest, so the
bulk importer never needs to know which file format the data came from.
"""

import abc
from decimal import Decimal, InvalidOperation
from typing import Optional

from pydantic import ValidationError

from app.schemas.imports import BulkImportRequest


class ParseError(Exception):
    """Raised when a file cannot be parsed (bad format, encoding error, etc.)."""
    pass


class BaseParser(abc.ABC):
    """
    Abstract parser interface. One concrete implementation per file format.

    Parsers must never write to the database — that is the importer's job.
    """

    @abc.abstractmethod
    def parse(self, data: bytes, filename: str) -> BulkImportRequest:
        """
        Parse file bytes into a bulk import payload.

        Raises:
            ParseError: If the file cannot be parsed or fails validation.
        """

    # ── Shared utilities for subclasses ──────────────────────────────────────

    @staticmethod
    def decode(data: bytes, filename: str) -> str:
        try:
            return data.decode("utf-8-sig")  # utf-8-sig strips BOM if present
        except UnicodeDecodeError as exc:
            raise ParseError(
                f"Cannot decode file {filename!r} — expected UTF-8"
            ) from exc

    @staticmethod
    def validate(payload: dict, filename: str) -> BulkImportRequest:
        try:
            return BulkImportRequest.model_validate(payload)
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            )
            raise ParseError(f"Invalid import data in {filename!r}: {problems}") from exc

    @staticmethod
    def to_decimal(value: object) -> Decimal:
        """Safely convert a value to Decimal. Raises ParseError on failure."""
        if isinstance(value, Decimal):
            return value
        try:
            cleaned = str(value).strip().replace(",", "").replace("$", "").replace(" ", "")
            if not cleaned:
                raise ParseError("Cannot convert empty value to Decimal")
            return Decimal(cleaned)
        except InvalidOperation:
            raise ParseError(f"Cannot convert {value!r} to a monetary Decimal")

    @staticmethod
    def clean_str(value: object) -> Optional[str]:
        """Strip a cell value; only an empty cell becomes None."""
        if value is None:
            return None
        return str(value).strip() or None
