"""Checklist taxonomy CSV parser."""

from __future__ import annotations

import logging

from birdcode_map.datasources.checklist.models import (
    CATEGORY_ALIASES,
    CATEGORY_COLUMN,
    CODE_COLUMN,
    COMMON_NAME_COLUMN,
    NAME_COLUMN,
    REQUIRED_COLUMNS,
    ChecklistCategory,
    ChecklistRawRecord,
)
from birdcode_map.datasources.common import (
    ParseError,
    ParseErrorType,
    ParseResult,
    RowCounter,
    is_indeterminate,
    read_rows,
    structural_failure,
)
from birdcode_map.normalize import ScientificNameNormalizer, default_normalizer
from birdcode_map.schemas import ScientificName, SpeciesCode

log = logging.getLogger(__name__)


def parse_checklist(
    text: str,
    *,
    filter_species_only: bool = False,
    normalizer: ScientificNameNormalizer | None = None,
) -> ParseResult[ChecklistRawRecord]:
    """Parse checklist taxonomy CSV text into validated records.

    Args:
        text: Full CSV content, header row included. A leading BOM is ignored.
        filter_species_only: Skip every row whose category is not ``species``.
        normalizer: Name corrector; defaults to the active adjustment set.

    Returns:
        A ``ParseResult``. Rows with missing or malformed required values are
        reported as errors; indeterminate names, unmapped categories and rows
        removed by ``filter_species_only`` are counted as skipped.
    """
    normalize = normalizer or default_normalizer
    rows, failure = read_rows(text, REQUIRED_COLUMNS)
    if failure is not None:
        log.warning("Checklist parse aborted: %s", failure.message)
        return structural_failure(failure.type, failure.message, failure.value)
    if not rows:
        return structural_failure(ParseErrorType.MALFORMED_ROW, "CSV contains no data rows")

    records: list[ChecklistRawRecord] = []
    errors: list[ParseError] = []
    counter = RowCounter(total=len(rows))

    def reject(error_type: ParseErrorType, message: str, row: int, value: str) -> None:
        counter.errored += 1
        errors.append(ParseError(type=error_type, message=message, row=row, value=value))

    for row_number, row in enumerate(rows, start=1):
        code_raw = row.get(CODE_COLUMN, "")
        name_raw = row.get(NAME_COLUMN, "")

        if not code_raw or not name_raw:
            reject(
                ParseErrorType.EMPTY_REQUIRED_FIELD,
                f"Missing required {CODE_COLUMN} or {NAME_COLUMN}",
                row_number,
                code_raw or name_raw,
            )
            continue

        category = CATEGORY_ALIASES.get(row.get(CATEGORY_COLUMN, "").lower())
        if category is None:
            counter.skipped += 1
            continue
        if filter_species_only and category is not ChecklistCategory.SPECIES:
            counter.skipped += 1
            continue

        name = normalize(name_raw)
        if is_indeterminate(name):
            counter.skipped += 1
            continue
        if not ScientificName.is_valid(name):
            reject(
                ParseErrorType.INVALID_SCIENTIFIC_NAME,
                f"Invalid scientific name format: {name_raw}",
                row_number,
                name_raw,
            )
            continue

        if not SpeciesCode.is_valid(code_raw):
            reject(
                ParseErrorType.INVALID_CODE_FORMAT,
                f"Invalid species code format: {code_raw}",
                row_number,
                code_raw,
            )
            continue

        records.append(
            ChecklistRawRecord(
                category=category,
                code=SpeciesCode(code_raw),
                scientific_name=ScientificName(name),
                common_name=row.get(COMMON_NAME_COLUMN, ""),
            )
        )
        counter.valid += 1

    stats = counter.freeze()
    log.info(
        "Checklist parsed: %d rows, %d valid, %d skipped, %d errors",
        stats.total_rows,
        stats.valid_records,
        stats.skipped_records,
        stats.error_records,
    )
    return ParseResult(success=not errors, records=records, errors=errors, stats=stats)
