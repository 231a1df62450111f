"""Tests for parse and join diagnostics."""

from __future__ import annotations

from collections.abc import Callable

from birdcode_map.analysis.diagnostics import diagnose_sources, group_errors
from birdcode_map.datasources.common import ParseError, ParseErrorType

MakeCsv = Callable[[list[dict[str, str]]], str]


class TestGroupErrors:
    """Grouping by error type."""

    def test_groups_sorted_by_count(self) -> None:
        errors = [
            ParseError(ParseErrorType.INVALID_CODE_FORMAT, "bad code", 1, "A"),
            ParseError(ParseErrorType.EMPTY_REQUIRED_FIELD, "empty", 2),
            ParseError(ParseErrorType.INVALID_CODE_FORMAT, "bad code", 3, "B"),
        ]
        groups = group_errors(errors)
        assert [(g.type, g.count) for g in groups] == [
            ("INVALID_CODE_FORMAT", 2),
            ("EMPTY_REQUIRED_FIELD", 1),
        ]

    def test_samples_capped(self) -> None:
        errors = [
            ParseError(ParseErrorType.INVALID_CODE_FORMAT, "bad code", row, str(row))
            for row in range(1, 6)
        ]
        (group,) = group_errors(errors, sample_size=2)
        assert group.count == 5
        assert [e.row for e in group.samples] == [1, 2]

    def test_empty(self) -> None:
        assert group_errors([]) == []


class TestDiagnoseSources:
    """End-to-end report over CSV text."""

    def test_variant_gain(self, make_checklist_csv: MakeCsv, make_banding_csv: MakeCsv) -> None:
        checklist = make_checklist_csv(
            [
                {"category": "species", "code": "amecro", "name": "Corvus brachyrhynchos"},
                {"category": "issf", "code": "icegul1", "name": "Larus glaucoides kumlieni"},
                {"category": "species", "code": "BAD", "name": "Corvus corax"},
            ]
        )
        banding = make_banding_csv(
            [
                {"alpha4": "AMCR", "name": "Corvus brachyrhynchos"},
                {"alpha4": "ICGU", "name": "Larus glaucoides"},
            ]
        )
        report = diagnose_sources(checklist, banding)

        assert report.exact_join.successful_matches == 1
        assert report.variant_join.successful_matches == 2
        assert report.variant_join.binomial_matches == 1
        assert report.variant_gain == 1
        assert report.checklist.stats.error_records == 1
        assert [g.type for g in report.checklist.error_groups] == ["INVALID_CODE_FORMAT"]
        assert report.banding.error_groups == []

    def test_structural_failure_reported(self, make_banding_csv: MakeCsv) -> None:
        banding = make_banding_csv([{"alpha4": "AMCR", "name": "Corvus brachyrhynchos"}])
        report = diagnose_sources("SPECIES_CODE\namecro\n", banding)

        assert report.checklist.stats.total_rows == 0
        assert [g.type for g in report.checklist.error_groups] == ["MISSING_COLUMNS"]
        assert report.variant_join.successful_matches == 0
        assert report.variant_join.unmatched_banding_records == 1
