"""Joined pairs -> canonical mapping records.

Validates run metadata, guards against repeated keys, resolves common-name
disagreements and runs every candidate through the ``MappingRecord`` schema
before it is emitted. A record is either fully valid or dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from birdcode_map.schemas import CommonNameSource, MappingRecord, is_iso_timestamp

if TYPE_CHECKING:
    from birdcode_map.analysis.join import JoinedRecord

log = logging.getLogger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = tuple(MappingRecord.model_fields)


# =============================================================================
# Models
# =============================================================================


class MappingErrorType(StrEnum):
    """Categories of transform and schema failure."""

    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    INVALID_FIELD_FORMAT = "INVALID_FIELD_FORMAT"
    INVALID_DATE_FORMAT = "INVALID_DATE_FORMAT"
    DUPLICATE_ALPHA4_CODE = "DUPLICATE_ALPHA4_CODE"
    DUPLICATE_CODE = "DUPLICATE_CODE"
    INVALID_SOURCE_METADATA = "INVALID_SOURCE_METADATA"


@dataclass(frozen=True)
class MappingError:
    """One problem found while transforming or validating."""

    type: MappingErrorType
    field: str
    message: str
    value: Any = None


@dataclass(frozen=True)
class SchemaValidationResult:
    valid: bool
    errors: list[MappingError] = field(default_factory=list)
    record: MappingRecord | None = None


@dataclass(frozen=True)
class TransformOptions:
    """Run metadata stamped onto every emitted record."""

    source: str
    source_version: str
    updated_at: str
    preferred_common_name_source: CommonNameSource | str = CommonNameSource.CHECKLIST


@dataclass(frozen=True)
class TransformStats:
    total_input_records: int = 0
    successful_transformations: int = 0
    validation_errors: int = 0
    name_conflicts: int = 0
    duplicate_keys: int = 0


@dataclass(frozen=True)
class TransformMetadata:
    """Provenance for one transform batch."""

    source: str
    source_version: str
    transformed_at: str
    record_count: int


@dataclass(frozen=True)
class TransformResult:
    success: bool
    records: list[MappingRecord]
    errors: list[MappingError]
    stats: TransformStats
    metadata: TransformMetadata


# =============================================================================
# Schema validation
# =============================================================================


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_mapping_schema(candidate: Mapping[str, Any]) -> SchemaValidationResult:
    """Check a candidate mapping dict against the canonical schema.

    Reports every missing/empty required field, every pattern violation on
    ``alpha4``, ``code`` and ``scientific_name``, and an unparseable
    ``updated_at``. On success the validated ``MappingRecord`` is attached.
    """
    errors: list[MappingError] = [
        MappingError(
            type=MappingErrorType.MISSING_REQUIRED_FIELD,
            field=name,
            message=f"Required field '{name}' is missing or empty",
            value=candidate.get(name),
        )
        for name in REQUIRED_FIELDS
        if _is_blank(candidate.get(name))
    ]
    missing = {e.field for e in errors}

    try:
        record = MappingRecord.model_validate(dict(candidate))
    except ValidationError as exc:
        for detail in exc.errors():
            name = str(detail["loc"][0]) if detail["loc"] else "record"
            if name in missing:
                continue
            if detail["type"] == "missing":
                error_type = MappingErrorType.MISSING_REQUIRED_FIELD
            elif name == "updated_at":
                error_type = MappingErrorType.INVALID_DATE_FORMAT
            else:
                error_type = MappingErrorType.INVALID_FIELD_FORMAT
            errors.append(
                MappingError(
                    type=error_type,
                    field=name,
                    message=f"Invalid {name}: {detail['msg']}",
                    value=candidate.get(name),
                )
            )
        return SchemaValidationResult(valid=False, errors=errors)

    return SchemaValidationResult(valid=not errors, errors=errors, record=None if errors else record)


# =============================================================================
# Transform
# =============================================================================


def _validate_options(options: TransformOptions) -> list[MappingError]:
    errors: list[MappingError] = []
    if _is_blank(options.source):
        errors.append(
            MappingError(
                type=MappingErrorType.INVALID_SOURCE_METADATA,
                field="source",
                message="Source is required and cannot be empty",
                value=options.source,
            )
        )
    if _is_blank(options.source_version):
        errors.append(
            MappingError(
                type=MappingErrorType.INVALID_SOURCE_METADATA,
                field="source_version",
                message="Source version is required and cannot be empty",
                value=options.source_version,
            )
        )
    if _is_blank(options.updated_at) or not is_iso_timestamp(options.updated_at):
        errors.append(
            MappingError(
                type=MappingErrorType.INVALID_SOURCE_METADATA,
                field="updated_at",
                message="updated_at must be a valid ISO-8601 timestamp",
                value=options.updated_at,
            )
        )
    if options.preferred_common_name_source not in tuple(CommonNameSource):
        errors.append(
            MappingError(
                type=MappingErrorType.INVALID_SOURCE_METADATA,
                field="preferred_common_name_source",
                message="preferred_common_name_source must be 'checklist' or 'banding'",
                value=options.preferred_common_name_source,
            )
        )
    return errors


def transform_to_mapping_records(
    joined_records: list[JoinedRecord],
    options: TransformOptions,
) -> TransformResult:
    """Convert joined pairs into validated, key-unique mapping records.

    Invalid metadata aborts before any pair is looked at. Otherwise each pair
    is checked for an already-emitted ``alpha4`` or ``code``, its common name
    is resolved (``preferred_common_name_source`` wins on disagreement, and
    every disagreement is counted), and the candidate is schema-validated.
    Rejected pairs are dropped and counted; the batch always runs to the end.
    """
    transformed_at = datetime.now(UTC).isoformat()

    option_errors = _validate_options(options)
    if option_errors:
        log.warning("Transform aborted: %d invalid metadata fields", len(option_errors))
        return TransformResult(
            success=False,
            records=[],
            errors=option_errors,
            stats=TransformStats(
                total_input_records=len(joined_records),
                validation_errors=len(option_errors),
            ),
            metadata=TransformMetadata(
                source=options.source or "unknown",
                source_version=options.source_version or "unknown",
                transformed_at=transformed_at,
                record_count=0,
            ),
        )

    prefer_banding = CommonNameSource(options.preferred_common_name_source) is CommonNameSource.BANDING
    records: list[MappingRecord] = []
    errors: list[MappingError] = []
    seen_alpha4: set[str] = set()
    seen_codes: set[str] = set()
    validation_errors = 0
    name_conflicts = 0
    duplicate_keys = 0

    for joined in joined_records:
        if joined.alpha4 in seen_alpha4 or joined.code in seen_codes:
            duplicate_keys += 1
            if joined.alpha4 in seen_alpha4:
                errors.append(
                    MappingError(
                        type=MappingErrorType.DUPLICATE_ALPHA4_CODE,
                        field="alpha4",
                        message=f"Duplicate alpha4 code found: {joined.alpha4}",
                        value=joined.alpha4,
                    )
                )
            else:
                errors.append(
                    MappingError(
                        type=MappingErrorType.DUPLICATE_CODE,
                        field="code",
                        message=f"Duplicate species code found: {joined.code}",
                        value=joined.code,
                    )
                )
            continue

        common_name = joined.common_name_checklist
        if joined.common_name_checklist != joined.common_name_banding:
            name_conflicts += 1
            if prefer_banding:
                common_name = joined.common_name_banding

        validation = validate_mapping_schema(
            {
                "alpha4": str(joined.alpha4),
                "code": str(joined.code),
                "common_name": common_name,
                "scientific_name": str(joined.scientific_name),
                "source": options.source,
                "source_version": options.source_version,
                "updated_at": options.updated_at,
            }
        )
        if validation.record is None:
            validation_errors += 1
            errors.extend(validation.errors)
            continue

        records.append(validation.record)
        seen_alpha4.add(validation.record.alpha4)
        seen_codes.add(validation.record.code)

    stats = TransformStats(
        total_input_records=len(joined_records),
        successful_transformations=len(records),
        validation_errors=validation_errors,
        name_conflicts=name_conflicts,
        duplicate_keys=duplicate_keys,
    )
    log.info(
        "Transformed %d/%d pairs (%d schema errors, %d duplicate keys, %d name conflicts)",
        stats.successful_transformations,
        stats.total_input_records,
        stats.validation_errors,
        stats.duplicate_keys,
        stats.name_conflicts,
    )
    return TransformResult(
        success=validation_errors == 0 and duplicate_keys == 0,
        records=records,
        errors=errors,
        stats=stats,
        metadata=TransformMetadata(
            source=options.source,
            source_version=options.source_version,
            transformed_at=transformed_at,
            record_count=len(records),
        ),
    )
