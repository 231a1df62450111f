"""Banding-code authority CSV parser."""

from __future__ import annotations

import logging

from birdcode_map.datasources.banding.models import (
    CODE_COLUMN,
    COMMON_NAME_COLUMN,
    NAME_COLUMN,
    REQUIRED_COLUMNS,
    SECONDARY_CODE_COLUMN,
    SUBSPECIES_COLUMN,
    SUBSPECIES_MARKER,
    BandingRawRecord,
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
from birdcode_map.schemas import Alpha4Code, ScientificName

log = logging.getLogger(__name__)


def parse_banding(
    text: str,
    *,
    exclude_subspecies: bool = False,
    normalizer: ScientificNameNormalizer | None = None,
) -> ParseResult[BandingRawRecord]:
    """Parse banding-code list CSV text into validated records.

    Args:
        text: Full CSV content, header row included. A leading BOM is ignored.
        exclude_subspecies: Skip rows flagged ``+`` in the ``SP`` column.
        normalizer: Name corrector; defaults to the active adjustment set.
    """
    normalize = normalizer or default_normalizer
    rows, failure = read_rows(text, REQUIRED_COLUMNS)
    if failure is not None:
        log.warning("Banding parse aborted: %s", failure.message)
        return structural_failure(failure.type, failure.message, failure.value)
    if not rows:
        return structural_failure(ParseErrorType.MALFORMED_ROW, "CSV contains no data rows")

    records: list[BandingRawRecord] = []
    errors: list[ParseError] = []
    counter = RowCounter(total=len(rows))

    def reject(error_type: ParseErrorType, message: str, row: int, value: str) -> None:
        counter.errored += 1
        errors.append(ParseError(type=error_type, message=message, row=row, value=value))

    for row_number, row in enumerate(rows, start=1):
        alpha4_raw = row.get(CODE_COLUMN, "")
        name_raw = row.get(NAME_COLUMN, "")

        if not alpha4_raw or not name_raw:
            reject(
                ParseErrorType.EMPTY_REQUIRED_FIELD,
                f"Missing required {CODE_COLUMN} or {NAME_COLUMN}",
                row_number,
                alpha4_raw or name_raw,
            )
            continue

        if exclude_subspecies and row.get(SUBSPECIES_COLUMN, "") == SUBSPECIES_MARKER:
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

        if not Alpha4Code.is_valid(alpha4_raw):
            reject(
                ParseErrorType.INVALID_ALPHA4_CODE,
                f"Invalid Alpha4Code format: {alpha4_raw}",
                row_number,
                alpha4_raw,
            )
            continue

        records.append(
            BandingRawRecord(
                alpha4=Alpha4Code(alpha4_raw),
                scientific_name=ScientificName(name),
                common_name=row.get(COMMON_NAME_COLUMN, ""),
                secondary_code=row.get(SECONDARY_CODE_COLUMN, ""),
            )
        )
        counter.valid += 1

    stats = counter.freeze()
    log.info(
        "Banding list parsed: %d rows, %d valid, %d skipped, %d errors",
        stats.total_rows,
        stats.valid_records,
        stats.skipped_records,
        stats.error_records,
    )
    return ParseResult(success=not errors, records=records, errors=errors, stats=stats)
