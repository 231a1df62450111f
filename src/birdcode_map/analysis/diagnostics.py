"""Parse and join diagnostics for real source files.

Summarizes where rows are lost: parse errors grouped by type with a few
samples each, and how many extra matches the variant-aware join finds over
the exact baseline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from birdcode_map.analysis.join import (
    JoinStats,
    VariantPolicy,
    join_by_scientific_name,
    join_by_scientific_name_variants,
)
from birdcode_map.datasources.banding import parse_banding
from birdcode_map.datasources.checklist import parse_checklist

if TYPE_CHECKING:
    from birdcode_map.datasources.common import ParseError, ParseStats
    from birdcode_map.normalize import ScientificNameNormalizer


@dataclass
class ErrorGroup:
    """All errors of one type from one source, with a few examples."""

    type: str
    count: int
    samples: list[ParseError] = field(default_factory=list)


@dataclass
class SourceDiagnostics:
    label: str
    stats: ParseStats
    error_groups: list[ErrorGroup] = field(default_factory=list)


@dataclass
class DiagnosticReport:
    """Parse outcomes for both sources and exact vs variant join counts."""

    checklist: SourceDiagnostics
    banding: SourceDiagnostics
    exact_join: JoinStats
    variant_join: JoinStats

    @property
    def variant_gain(self) -> int:
        """Matches the variant-aware join adds over the exact join."""
        return self.variant_join.successful_matches - self.exact_join.successful_matches


def group_errors(errors: list[ParseError], sample_size: int = 3) -> list[ErrorGroup]:
    """Group errors by type, keeping the first ``sample_size`` of each."""
    groups: dict[str, ErrorGroup] = {}
    for error in errors:
        group = groups.setdefault(str(error.type), ErrorGroup(type=str(error.type), count=0))
        group.count += 1
        if len(group.samples) < sample_size:
            group.samples.append(error)
    return sorted(groups.values(), key=lambda g: (-g.count, g.type))


def diagnose_sources(
    checklist_text: str,
    banding_text: str,
    *,
    sample_size: int = 3,
    normalizer: ScientificNameNormalizer | None = None,
) -> DiagnosticReport:
    """Parse both sources and compare the two join strategies.

    The exact join runs on species-only checklist records; the variant join
    runs on every category with the ``all`` policy, matching a production
    build.
    """
    species_only = parse_checklist(
        checklist_text, filter_species_only=True, normalizer=normalizer
    )
    all_variants = parse_checklist(checklist_text, normalizer=normalizer)
    banding = parse_banding(banding_text, normalizer=normalizer)

    exact = join_by_scientific_name(species_only.records, banding.records)
    variants = join_by_scientific_name_variants(
        all_variants.records, banding.records, variant_policy=VariantPolicy.ALL
    )

    return DiagnosticReport(
        checklist=SourceDiagnostics(
            label="checklist",
            stats=all_variants.stats,
            error_groups=group_errors(all_variants.errors, sample_size),
        ),
        banding=SourceDiagnostics(
            label="banding",
            stats=banding.stats,
            error_groups=group_errors(banding.errors, sample_size),
        ),
        exact_join=exact.stats,
        variant_join=variants.stats,
    )
