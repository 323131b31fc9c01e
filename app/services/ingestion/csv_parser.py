"""
CSVParser — parses flat price-list CSV files into a BulkImportRequest.

One row = one (procedure, practice, price) triple:

    procedure,category,description,practice,address,phone,email,cost,currency,notes
    MRI Scan - Brain,Imaging,With contrast,City Medical Center,123 Main St,,,1200.00,USD,

Rows are grouped by procedure name in first-appearance order; within a
procedure the practice rows keep file order, so a repeated practice row is
applied last-write-wins by the importer exactly like a repeated entry in a
JSON payload. A procedure's description/category come from the first row
of that procedure that supplies them.

Column mapping strategy:
  Exported price lists use different headers. The parser uses a flexible
  alias map to find the right columns regardless of exact naming.
  procedure, practice and cost are required; a file missing any of them is
  rejected as a whole. A bad value in any row rejects the whole file too —
  imports are all-or-nothing, so there is no partial row skipping here.
"""

import io
import logging
from typing import Optional

import pandas as pd

from app.schemas.imports import BulkImportRequest
from app.services.ingestion.base import BaseParser, ParseError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("procedure", "practice", "cost")

# ── Column alias map ──────────────────────────────────────────────────────────
# canonical_name: [list of accepted header variants] (all lowercased, stripped)
COLUMN_ALIASES: dict[str, list[str]] = {
    "procedure": [
        "procedure",
        "procedure name",
        "procedure_name",
        "service",
        "service name",
        "service_name",
        "name",
    ],
    "description": [
        "description",
        "procedure description",
        "procedure_description",
        "desc",
    ],
    "category": [
        "category",
        "procedure category",
        "procedure_category",
        "specialty",
        "type",
    ],
    "practice": [
        "practice",
        "practice name",
        "practice_name",
        "provider",
        "provider name",
        "provider_name",
        "clinic",
        "facility",
    ],
    "address": [
        "address",
        "practice address",
        "practice_address",
        "location",
    ],
    "phone": [
        "phone",
        "practice phone",
        "practice_phone",
        "telephone",
        "phone number",
    ],
    "email": [
        "email",
        "practice email",
        "practice_email",
        "e-mail",
    ],
    "cost": [
        "cost",
        "price",
        "amount",
        "fee",
        "charge",
        "cash price",
        "cash_price",
    ],
    "currency": [
        "currency",
        "currency code",
        "currency_code",
        "ccy",
    ],
    "notes": [
        "notes",
        "note",
        "comments",
        "remarks",
    ],
}


class CSVParser(BaseParser):
    """
    Parses CSV files (and TSV) into a BulkImportRequest.
    Resilient to column naming variations via COLUMN_ALIASES.
    """

    def parse(self, data: bytes, filename: str) -> BulkImportRequest:
        text = self.decode(data, filename)
        delimiter = "\t" if "\t" in text[:2000] else ","

        # ── Load DataFrame ────────────────────────────────────────────────────
        try:
            df = pd.read_csv(
                io.StringIO(text),
                delimiter=delimiter,
                dtype=str,  # Read everything as string; we convert manually
                keep_default_na=False,  # Don't auto-convert '' to NaN
                skip_blank_lines=True,
            )
        except Exception as exc:
            raise ParseError(f"pandas failed to parse {filename!r}: {exc}") from exc

        if df.empty:
            raise ParseError(f"File {filename!r} contains no data rows")

        # ── Normalize column headers ──────────────────────────────────────────
        df.columns = [str(col).strip().lower() for col in df.columns]
        col_map = self._build_column_map(df.columns.tolist())

        # ── Group rows by procedure ───────────────────────────────────────────
        procedures: dict[str, dict] = {}

        for idx, row in df.iterrows():
            row_number = int(idx) + 2  # 1-based + header row

            procedure_name = self._get_str(row, col_map, "procedure")
            practice_name = self._get_str(row, col_map, "practice")
            if procedure_name is None:
                raise ParseError(f"Row {row_number}: procedure name is empty")
            if practice_name is None:
                raise ParseError(f"Row {row_number}: practice name is empty")

            raw_cost = self._get_str(row, col_map, "cost")
            if raw_cost is None:
                raise ParseError(f"Row {row_number}: cost is empty")
            try:
                cost = self.to_decimal(raw_cost)
            except ParseError as exc:
                raise ParseError(f"Row {row_number}: {exc}") from exc

            procedure = procedures.setdefault(
                procedure_name,
                {
                    "name": procedure_name,
                    "description": None,
                    "category": None,
                    "practices": [],
                },
            )
            for field in ("description", "category"):
                if procedure[field] is None:
                    procedure[field] = self._get_str(row, col_map, field)

            offer = {
                "practice_name": practice_name,
                "address": self._get_str(row, col_map, "address"),
                "phone": self._get_str(row, col_map, "phone"),
                "email": self._get_str(row, col_map, "email"),
                "cost": cost,
                "notes": self._get_str(row, col_map, "notes"),
            }
            currency = self._get_str(row, col_map, "currency")
            if currency is not None:
                offer["currency"] = currency
            procedure["practices"].append(offer)

        request = self.validate({"procedures": list(procedures.values())}, filename)
        logger.info(
            "CSVParser: parsed %d rows into %d procedures from %s",
            len(df),
            len(request.procedures),
            filename,
        )
        return request

    # ── Private helpers ───────────────────────────────────────────────────────

    def _build_column_map(self, actual_cols: list[str]) -> dict[str, Optional[str]]:
        """
        Map canonical column names to actual column names found in the file.
        Returns dict[canonical_name] -> actual_col_name | None
        """
        col_map: dict[str, Optional[str]] = {}
        missing: list[str] = []
        for canonical, aliases in COLUMN_ALIASES.items():
            found = None
            for actual in actual_cols:
                if actual in aliases or actual == canonical:
                    found = actual
                    break
            if found is None and canonical in REQUIRED_COLUMNS:
                missing.append(canonical)
            elif found is None:
                logger.debug("Optional column '%s' not found in file", canonical)
            col_map[canonical] = found

        if missing:
            raise ParseError(
                f"Required column(s) {missing} not found. Available: {actual_cols}"
            )
        return col_map

    def _get_str(self, row: pd.Series, col_map: dict, canonical: str) -> Optional[str]:
        col = col_map.get(canonical)
        if col is None or col not in row:
            return None
        return self.clean_str(row[col])
