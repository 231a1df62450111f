"""Joins checklist records to banding records by scientific name.

Two strategies:

``join_by_scientific_name``
    Exact name equality, one index per side. Used as a strict baseline and
    for diagnostics.

``join_by_scientific_name_variants``
    The production strategy. The banding list is mostly monotypic/binomial
    while the checklist may carry the same taxon under a subspecies, hybrid
    or slash name, so banding records are indexed both by full name and by
    their leading ``Genus species`` (slash names excepted). Checklist records
    claim banding records in priority order (species, then subspecies, then
    slash/hybrid); each banding record is claimed at most once.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum

from birdcode_map.datasources.banding import BandingRawRecord
from birdcode_map.datasources.checklist import ChecklistCategory, ChecklistRawRecord
from birdcode_map.schemas import SLASH_MARKER, binomial_of

log = logging.getLogger(__name__)


# =============================================================================
# Models
# =============================================================================


@dataclass(frozen=True)
class JoinedRecord:
    """A checklist record paired with the banding record for the same taxon."""

    alpha4: str
    code: str
    scientific_name: str
    common_name_checklist: str
    common_name_banding: str


@dataclass(frozen=True)
class JoinStats:
    """Counts describing one join run."""

    total_checklist_records: int = 0
    total_banding_records: int = 0
    successful_matches: int = 0
    unmatched_checklist_records: int = 0
    unmatched_banding_records: int = 0
    duplicate_scientific_names: int = 0
    exact_matches: int = 0
    binomial_matches: int = 0
    filtered_by_policy: int = 0


@dataclass(frozen=True)
class JoinResult:
    """Matched pairs plus everything that did not pair up."""

    success: bool
    matched: list[JoinedRecord] = field(default_factory=list)
    unmatched_checklist: list[ChecklistRawRecord] = field(default_factory=list)
    unmatched_banding: list[BandingRawRecord] = field(default_factory=list)
    duplicate_scientific_names: list[str] = field(default_factory=list)
    stats: JoinStats = field(default_factory=JoinStats)


class VariantPolicy(StrEnum):
    """Which checklist categories take part in a variant-aware join."""

    SPECIES = "species"
    SPECIES_SUBSPECIES = "species+subspecies"
    ALL = "all"


POLICY_CATEGORIES: dict[VariantPolicy, frozenset[ChecklistCategory]] = {
    VariantPolicy.SPECIES: frozenset({ChecklistCategory.SPECIES}),
    VariantPolicy.SPECIES_SUBSPECIES: frozenset(
        {ChecklistCategory.SPECIES, ChecklistCategory.SUBSPECIES}
    ),
    VariantPolicy.ALL: frozenset(ChecklistCategory),
}

# Lower ranks claim banding records first. Slash and hybrid share a rank.
CATEGORY_PRIORITY: dict[ChecklistCategory, int] = {
    ChecklistCategory.SPECIES: 0,
    ChecklistCategory.SUBSPECIES: 1,
    ChecklistCategory.SLASH: 2,
    ChecklistCategory.HYBRID: 2,
}


def _pair(checklist: ChecklistRawRecord, banding: BandingRawRecord) -> JoinedRecord:
    return JoinedRecord(
        alpha4=banding.alpha4,
        code=checklist.code,
        scientific_name=checklist.scientific_name,
        common_name_checklist=checklist.common_name,
        common_name_banding=banding.common_name,
    )


def _repeated_names(names: list[str]) -> list[str]:
    return [name for name, count in Counter(names).items() if count > 1]


# =============================================================================
# Exact join
# =============================================================================


def join_by_scientific_name(
    checklist_records: list[ChecklistRawRecord],
    banding_records: list[BandingRawRecord],
    *,
    strict_mode: bool = False,
    validate_common_names: bool = False,
) -> JoinResult:
    """Pair records whose scientific names are identical.

    A name appearing more than once on one side is a duplicate. In strict mode
    any duplicate aborts the join with zero matches. Otherwise duplicates are
    tolerated and the last record seen for a name wins the index slot; the
    result still reports ``success=False`` so callers can see the collision.

    With both ``strict_mode`` and ``validate_common_names``, pairs whose
    common names differ are reported unmatched on both sides.
    """
    duplicates = _repeated_names([r.scientific_name for r in checklist_records])
    for name in _repeated_names([r.scientific_name for r in banding_records]):
        if name not in duplicates:
            duplicates.append(name)

    if strict_mode and duplicates:
        log.warning("Strict join aborted: %d duplicate scientific names", len(duplicates))
        return JoinResult(
            success=False,
            unmatched_checklist=list(checklist_records),
            unmatched_banding=list(banding_records),
            duplicate_scientific_names=duplicates,
            stats=JoinStats(
                total_checklist_records=len(checklist_records),
                total_banding_records=len(banding_records),
                unmatched_checklist_records=len(checklist_records),
                unmatched_banding_records=len(banding_records),
                duplicate_scientific_names=len(duplicates),
            ),
        )

    # Last write wins for repeated names.
    checklist_index = {str(r.scientific_name): r for r in checklist_records}
    banding_index = {str(r.scientific_name): r for r in banding_records}

    matched: list[JoinedRecord] = []
    unmatched_checklist: list[ChecklistRawRecord] = []
    unmatched_banding: list[BandingRawRecord] = []

    for name, checklist_record in checklist_index.items():
        banding_record = banding_index.get(name)
        if banding_record is None:
            unmatched_checklist.append(checklist_record)
            continue
        if (
            strict_mode
            and validate_common_names
            and checklist_record.common_name != banding_record.common_name
        ):
            unmatched_checklist.append(checklist_record)
            unmatched_banding.append(banding_record)
            continue
        matched.append(_pair(checklist_record, banding_record))

    unmatched_banding.extend(r for name, r in banding_index.items() if name not in checklist_index)

    return JoinResult(
        success=not duplicates,
        matched=matched,
        unmatched_checklist=unmatched_checklist,
        unmatched_banding=unmatched_banding,
        duplicate_scientific_names=duplicates,
        stats=JoinStats(
            total_checklist_records=len(checklist_records),
            total_banding_records=len(banding_records),
            successful_matches=len(matched),
            unmatched_checklist_records=len(unmatched_checklist),
            unmatched_banding_records=len(unmatched_banding),
            duplicate_scientific_names=len(duplicates),
            exact_matches=len(matched),
        ),
    )


# =============================================================================
# Variant-aware join
# =============================================================================


def _fallback_key(name: str) -> str | None:
    # Slash names cover two taxa, so they only ever match exactly.
    if SLASH_MARKER in name:
        return None
    return binomial_of(name)


def _first_unclaimed(candidates: list[int] | None, claimed: set[int]) -> int | None:
    if not candidates:
        return None
    for index in candidates:
        if index not in claimed:
            return index
    return None


def join_by_scientific_name_variants(
    checklist_records: list[ChecklistRawRecord],
    banding_records: list[BandingRawRecord],
    *,
    variant_policy: VariantPolicy | str = VariantPolicy.ALL,
) -> JoinResult:
    """Pair records using exact-name matching with a binomial fallback.

    For each checklist record allowed by ``variant_policy``, in priority order
    (ties keep input order):

    1. claim the first unclaimed banding record with the same full name;
    2. otherwise claim the first unclaimed banding record whose leading
       ``Genus species`` equals the checklist record's (slash names on
       either side skip this step);
    3. otherwise report the checklist record unmatched.

    Unmatched records are diagnostics, so ``success`` is always True. Matches
    are returned in checklist input order.
    """
    allowed = POLICY_CATEGORIES[VariantPolicy(variant_policy)]

    by_name: dict[str, list[int]] = {}
    by_binomial: dict[str, list[int]] = {}
    for index, record in enumerate(banding_records):
        by_name.setdefault(str(record.scientific_name), []).append(index)
        binomial = _fallback_key(record.scientific_name)
        if binomial is not None:
            by_binomial.setdefault(binomial, []).append(index)

    eligible = [
        (position, record)
        for position, record in enumerate(checklist_records)
        if record.category in allowed
    ]
    filtered = len(checklist_records) - len(eligible)
    # sorted() is stable, so equal-priority records keep input order.
    ordered = sorted(eligible, key=lambda item: CATEGORY_PRIORITY[item[1].category])

    claimed: set[int] = set()
    matches: list[tuple[int, JoinedRecord]] = []
    unmatched_positions: list[int] = []
    exact = 0
    fallback = 0

    for position, record in ordered:
        index = _first_unclaimed(by_name.get(str(record.scientific_name)), claimed)
        if index is not None:
            exact += 1
        else:
            binomial = _fallback_key(record.scientific_name)
            index = _first_unclaimed(by_binomial.get(binomial) if binomial else None, claimed)
            if index is None:
                unmatched_positions.append(position)
                continue
            fallback += 1
        claimed.add(index)
        matches.append((position, _pair(record, banding_records[index])))

    matches.sort(key=lambda item: item[0])
    matched = [joined for _, joined in matches]
    unmatched_checklist = [checklist_records[p] for p in sorted(unmatched_positions)]
    unmatched_banding = [r for i, r in enumerate(banding_records) if i not in claimed]

    duplicates = _repeated_names([str(r.scientific_name) for _, r in eligible])
    for name in _repeated_names([str(r.scientific_name) for r in banding_records]):
        if name not in duplicates:
            duplicates.append(name)

    stats = JoinStats(
        total_checklist_records=len(checklist_records),
        total_banding_records=len(banding_records),
        successful_matches=len(matched),
        unmatched_checklist_records=len(unmatched_checklist),
        unmatched_banding_records=len(unmatched_banding),
        duplicate_scientific_names=len(duplicates),
        exact_matches=exact,
        binomial_matches=fallback,
        filtered_by_policy=filtered,
    )
    log.info(
        "Variant join (%s): %d matched (%d exact, %d binomial), "
        "%d checklist and %d banding unmatched",
        VariantPolicy(variant_policy).value,
        stats.successful_matches,
        stats.exact_matches,
        stats.binomial_matches,
        stats.unmatched_checklist_records,
        stats.unmatched_banding_records,
    )
    return JoinResult(
        success=True,
        matched=matched,
        unmatched_checklist=unmatched_checklist,
        unmatched_banding=unmatched_banding,
        duplicate_scientific_names=duplicates,
        stats=stats,
    )
