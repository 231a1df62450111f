"""
Prefect flow for building a versioned mapping artifact.

parse(checklist) -> parse(banding) -> variant join (policy "all")
-> transform -> write ``map-<version>.json``.

Run locally:
    python -m birdcode_map.flows.build

Configuration errors (bad version, missing source, unusable metadata) are
raised before anything is written. Row-level problems, unmatched records and
dropped duplicates are reported in the flow log and do not stop the build.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from prefect import flow, task
from prefect.cache_policies import NO_CACHE

from birdcode_map.analysis.join import JoinResult, VariantPolicy, join_by_scientific_name_variants
from birdcode_map.analysis.transform import (
    MappingErrorType,
    TransformOptions,
    TransformResult,
    transform_to_mapping_records,
)
from birdcode_map.config import get_settings
from birdcode_map.datasources.banding import BandingRawRecord, parse_banding
from birdcode_map.datasources.checklist import ChecklistRawRecord, parse_checklist
from birdcode_map.datasources.common import ParseResult
from birdcode_map.errors import (
    ArtifactExistsError,
    BuildConfigurationError,
    InvalidMapVersionError,
    SourceFormatError,
    SourceNotFoundError,
)
from birdcode_map.normalize import default_normalizer
from birdcode_map.schemas import BuildResult, CommonNameSource
from birdcode_map.store import MapStore
from birdcode_map.versioning import is_valid_map_version

BUILD_SOURCE = "etl-build"


# =============================================================================
# Pre-flight checks
# =============================================================================


def check_build_inputs(
    checklist_path: Path,
    banding_path: Path,
    store: MapStore,
    map_version: str,
    preferred_common_name_source: str,
) -> None:
    """Raise for any caller-supplied input that makes the build impossible."""
    if not is_valid_map_version(map_version):
        msg = f"Invalid map version (expected YYYY.MM[.DD][-hotfix.N]): {map_version}"
        raise InvalidMapVersionError(msg)
    if not checklist_path.exists():
        msg = f"Checklist CSV not found at {checklist_path}"
        raise SourceNotFoundError(msg)
    if not banding_path.exists():
        msg = f"Banding CSV not found at {banding_path}"
        raise SourceNotFoundError(msg)
    if preferred_common_name_source not in tuple(CommonNameSource):
        msg = f"Unknown preferred common-name source: {preferred_common_name_source}"
        raise BuildConfigurationError(msg)
    if store.exists(map_version):
        msg = f"Map artifact already exists for version {map_version}: {store.map_path(map_version)}"
        raise ArtifactExistsError(msg)


# =============================================================================
# Tasks
# =============================================================================


@task(name="read-source", cache_policy=NO_CACHE)
def read_source(path: Path) -> str:
    """Read one source file as UTF-8 text."""
    return path.read_text(encoding="utf-8")


@task(name="parse-checklist")
def parse_checklist_source(text: str) -> ParseResult[ChecklistRawRecord]:
    """Parse the checklist with every category kept for the variant join."""
    result = parse_checklist(text, filter_species_only=False)
    _raise_if_structural("checklist", result)
    return result


@task(name="parse-banding")
def parse_banding_source(text: str) -> ParseResult[BandingRawRecord]:
    """Parse the banding list, subspecies rows included."""
    result = parse_banding(text)
    _raise_if_structural("banding", result)
    return result


@task(name="join-sources")
def join_sources(
    checklist: ParseResult[ChecklistRawRecord],
    banding: ParseResult[BandingRawRecord],
) -> JoinResult:
    """Variant-aware join with every category eligible."""
    return join_by_scientific_name_variants(
        checklist.records, banding.records, variant_policy=VariantPolicy.ALL
    )


@task(name="transform-mapping")
def transform_mapping(joined: JoinResult, options: TransformOptions) -> TransformResult:
    """Turn joined pairs into validated mapping records."""
    result = transform_to_mapping_records(joined.matched, options)
    metadata_errors = [e for e in result.errors if e.type is MappingErrorType.INVALID_SOURCE_METADATA]
    if metadata_errors:
        details = "; ".join(e.message for e in metadata_errors)
        msg = f"Invalid run metadata: {details}"
        raise BuildConfigurationError(msg)
    return result


@task(name="write-mapping", cache_policy=NO_CACHE)
def write_mapping(
    store: MapStore,
    map_version: str,
    transform: TransformResult,
    provenance: dict[str, Any],
) -> Path:
    """Persist the full record set in one atomic write."""
    return store.write_map(map_version, transform.records, source=BUILD_SOURCE, **provenance)


def _raise_if_structural(label: str, result: ParseResult[Any]) -> None:
    if result.is_structural_failure:
        details = "; ".join(e.message for e in result.errors)
        msg = f"Cannot parse {label} source: {details}"
        raise SourceFormatError(msg)


# =============================================================================
# Main build flow
# =============================================================================


@flow(name="build-mapping", log_prints=True)
def build_mapping(
    checklist_path: Path,
    banding_path: Path,
    output_dir: Path,
    map_version: str,
    updated_at: str,
    preferred_common_name_source: str = CommonNameSource.CHECKLIST,
) -> BuildResult:
    """
    Build ``map-<map_version>.json`` from the two source registries.

    This is the main Prefect flow. Inputs are checked before any file is
    read; the full record set is built in memory before the single write.
    """
    store = MapStore(Path(output_dir))
    check_build_inputs(
        Path(checklist_path), Path(banding_path), store, map_version, preferred_common_name_source
    )

    print(f"Reading sources for map {map_version}...")
    checklist_text = read_source(Path(checklist_path))
    banding_text = read_source(Path(banding_path))

    checklist = parse_checklist_source(checklist_text)
    print(
        f"Checklist: {checklist.stats.valid_records} valid, "
        f"{checklist.stats.skipped_records} skipped, {checklist.stats.error_records} errors"
    )
    banding = parse_banding_source(banding_text)
    print(
        f"Banding: {banding.stats.valid_records} valid, "
        f"{banding.stats.skipped_records} skipped, {banding.stats.error_records} errors"
    )

    joined = join_sources(checklist, banding)
    print(
        f"Join: {joined.stats.successful_matches} matched "
        f"({joined.stats.exact_matches} exact, {joined.stats.binomial_matches} binomial); "
        f"unmatched checklist={joined.stats.unmatched_checklist_records} "
        f"banding={joined.stats.unmatched_banding_records}"
    )

    options = TransformOptions(
        source=BUILD_SOURCE,
        source_version=map_version,
        updated_at=updated_at,
        preferred_common_name_source=preferred_common_name_source,
    )
    transform = transform_mapping(joined, options)
    if not transform.success:
        print(
            f"Warning: dropped {transform.stats.duplicate_keys} duplicate keys and "
            f"{transform.stats.validation_errors} invalid records"
        )

    provenance = {
        "updated_at": updated_at,
        "genus_adjustments": default_normalizer.version,
        "parse": {
            "checklist": asdict(checklist.stats),
            "banding": asdict(banding.stats),
        },
        "join": asdict(joined.stats),
        "transform": asdict(transform.stats),
    }
    output_path = write_mapping(store, map_version, transform, provenance)

    print(f"Map built: {output_path} ({len(transform.records)} records)")
    return BuildResult(
        output_path=str(output_path),
        record_count=len(transform.records),
        map_version=map_version,
    )


if __name__ == "__main__":
    settings = get_settings()
    result = build_mapping(
        checklist_path=settings.resolved_checklist_path,
        banding_path=settings.resolved_banding_path,
        output_dir=settings.resolved_output_dir,
        map_version=settings.map_version or datetime.now(UTC).strftime("%Y.%m"),
        updated_at=datetime.now(UTC).isoformat(),
        preferred_common_name_source=settings.preferred_common_name_source,
    )
    print(f"Flow complete: {result}")
