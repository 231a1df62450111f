"""Shared tabular-text reading and parse result types.

Both registries ship as comma-delimited text with a header row. This module
turns that text into row dicts (or a single structural error) and defines the
result shape every source parser returns.
"""

from __future__ import annotations

import csv
import io
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")

_BOM = re.compile(r"^\ufeff+")

# Indeterminate names carry no species identity: "Larus sp.",
# "Anser/Branta sp.", "Tyrannidae (gen. sp.)".
_INDETERMINATE = re.compile(r"(?:^|[\s(/])(?:gen\.?,?\s*)?sp\.?(?=$|[\s)])", re.IGNORECASE)


class ParseErrorType(StrEnum):
    """Categories of parse failure. The first two are structural."""

    MISSING_COLUMNS = "MISSING_COLUMNS"
    MALFORMED_ROW = "MALFORMED_ROW"
    EMPTY_REQUIRED_FIELD = "EMPTY_REQUIRED_FIELD"
    INVALID_SCIENTIFIC_NAME = "INVALID_SCIENTIFIC_NAME"
    INVALID_ALPHA4_CODE = "INVALID_ALPHA4_CODE"
    INVALID_CODE_FORMAT = "INVALID_CODE_FORMAT"


STRUCTURAL_ERROR_TYPES = frozenset({ParseErrorType.MISSING_COLUMNS, ParseErrorType.MALFORMED_ROW})


@dataclass(frozen=True)
class ParseError:
    """A single parse problem. ``row`` is 1-based excluding the header; 0 is structural."""

    type: ParseErrorType
    message: str
    row: int
    value: str = ""


@dataclass(frozen=True)
class ParseStats:
    """Row accounting: valid + skipped + error == total."""

    total_rows: int = 0
    valid_records: int = 0
    skipped_records: int = 0
    error_records: int = 0


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """Output of one parse pass over one source."""

    success: bool
    records: list[T] = field(default_factory=list)
    errors: list[ParseError] = field(default_factory=list)
    stats: ParseStats = field(default_factory=ParseStats)

    @property
    def is_structural_failure(self) -> bool:
        return any(e.type in STRUCTURAL_ERROR_TYPES for e in self.errors) and not self.records


@dataclass
class RowCounter:
    """Mutable tally used while walking rows."""

    total: int = 0
    valid: int = 0
    skipped: int = 0
    errored: int = 0

    def freeze(self) -> ParseStats:
        return ParseStats(
            total_rows=self.total,
            valid_records=self.valid,
            skipped_records=self.skipped,
            error_records=self.errored,
        )


def structural_failure(error_type: ParseErrorType, message: str, value: str = "") -> ParseResult[T]:
    """A failed result with one structural error and zero records."""
    return ParseResult(
        success=False,
        errors=[ParseError(type=error_type, message=message, row=0, value=value)],
    )


def strip_bom(text: str) -> str:
    """Remove any leading byte-order markers."""
    return _BOM.sub("", text)


def is_indeterminate(name: str) -> bool:
    """True for names ending in ``sp.`` or generic ``(gen. sp.)`` placeholders."""
    return bool(_INDETERMINATE.search(name))


def read_rows(
    text: str, required_columns: Iterable[str]
) -> tuple[list[dict[str, str]], ParseError | None]:
    """Parse CSV text into row dicts after checking the header.

    Returns ``(rows, None)`` on success, or ``([], error)`` when the header is
    missing required columns or the text cannot be parsed as CSV. Cells are
    stripped; cells missing from short rows come back as ``""``.
    """
    reader = csv.DictReader(io.StringIO(strip_bom(text), newline=""), strict=True)
    try:
        header = reader.fieldnames or []
        present = {name.strip() for name in header}
        missing = [col for col in required_columns if col not in present]
        if missing:
            return [], ParseError(
                type=ParseErrorType.MISSING_COLUMNS,
                message=f"Required columns missing: {', '.join(missing)}",
                row=0,
            )
        rows = [
            {
                (key or "").strip(): (value or "").strip()
                for key, value in raw.items()
                if isinstance(value, str) or value is None
            }
            for raw in reader
        ]
    except csv.Error as exc:
        return [], ParseError(
            type=ParseErrorType.MALFORMED_ROW,
            message="Failed to parse CSV",
            row=0,
            value=str(exc),
        )
    return rows, None
