"""Concurrent CSV import of street markets with idempotent upserts."""

from app.features.importer.counters import ImportCounters
from app.features.importer.parser import (
    FieldParseError,
    InsufficientColumnsError,
    ParseError,
    parse_row,
    record_to_row,
)
from app.features.importer.reader import (
    CsvSource,
    HeaderReadError,
    ImportFileError,
    RowReadError,
    SourceOpenError,
)
from app.features.importer.report import format_report
from app.features.importer.service import MarketImporter, run_import

__all__ = [
    "CsvSource",
    "FieldParseError",
    "HeaderReadError",
    "ImportCounters",
    "ImportFileError",
    "InsufficientColumnsError",
    "MarketImporter",
    "ParseError",
    "RowReadError",
    "SourceOpenError",
    "format_report",
    "parse_row",
    "record_to_row",
    "run_import",
]
