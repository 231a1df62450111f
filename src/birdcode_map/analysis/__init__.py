"""Cross-source reconciliation logic.

Each module combines the outputs of both registries into structures the build
flow can persist directly. This is the domain logic layer.

Dependency rule: analysis/ imports datasources/ models and parsers only.
It never reads files, writes artifacts, or uses Prefect decorators.

Modules:
  - join: exact and variant-aware joins -> JoinedRecord pairs + statistics
  - transform: joined pairs + run metadata -> validated MappingRecords
  - diagnostics: parse error groups + exact vs variant join comparison
"""

from birdcode_map.analysis.diagnostics import DiagnosticReport, diagnose_sources
from birdcode_map.analysis.join import (
    JoinedRecord,
    JoinResult,
    JoinStats,
    VariantPolicy,
    join_by_scientific_name,
    join_by_scientific_name_variants,
)
from birdcode_map.analysis.transform import (
    MappingError,
    MappingErrorType,
    TransformOptions,
    TransformResult,
    transform_to_mapping_records,
    validate_mapping_schema,
)

__all__ = [
    "DiagnosticReport",
    "JoinResult",
    "JoinStats",
    "JoinedRecord",
    "MappingError",
    "MappingErrorType",
    "TransformOptions",
    "TransformResult",
    "VariantPolicy",
    "diagnose_sources",
    "join_by_scientific_name",
    "join_by_scientific_name_variants",
    "transform_to_mapping_records",
    "validate_mapping_schema",
]
