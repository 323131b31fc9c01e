"""
Parser dispatcher — routes import file bytes to the correct parser by format.
"""

from app.services.ingestion.base import BaseParser, ParseError
from app.services.ingestion.csv_parser import CSVParser
from app.services.ingestion.json_parser import JSONParser

_PARSERS: dict[str, BaseParser] = {
    "csv": CSVParser(),
    "json": JSONParser(),
}


def get_parser(file_format: str) -> BaseParser:
    """Return the parser for the given format string ('csv' or 'json')."""
    parser = _PARSERS.get(file_format.lower())
    if parser is None:
        supported = list(_PARSERS.keys())
        raise ParseError(
            f"Unsupported file format: {file_format!r}. Supported: {supported}"
        )
    return parser


def detect_format(filename: str) -> str:
    """
    Detect file format from extension.
    Returns 'csv' or 'json'. Raises ParseError for unsupported extensions.
    """
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if ext in ("csv", "tsv"):
        return "csv"
    elif ext == "json":
        return "json"
    elif ext in ("xlsx", "xls"):
        raise ParseError(
            "Excel files (.xlsx/.xls) are not supported. "
            "Please export your price list as CSV."
        )
    else:
        raise ParseError(
            f"Cannot determine file format from filename {filename!r}. "
            f"Supported extensions: .csv, .tsv, .json"
        )


def parse_import_file(data: bytes, filename: str):
    """Detect the format from the filename and parse into a BulkImportRequest."""
    return get_parser(detect_format(filename)).parse(data, filename)
