"""Tests for the checklist taxonomy parser."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from birdcode_map.datasources.checklist import ChecklistCategory, parse_checklist
from birdcode_map.datasources.common import ParseErrorType

MakeCsv = Callable[[list[dict[str, str]]], str]


def _row(category: str, code: str, name: str, common: str = "") -> dict[str, str]:
    return {"category": category, "code": code, "name": name, "common": common}


class TestParseChecklistValidRows:
    """Rows that become records."""

    def test_species_row(self, make_checklist_csv: MakeCsv) -> None:
        text = make_checklist_csv(
            [_row("species", "amecro", "Corvus brachyrhynchos", "American Crow")]
        )
        result = parse_checklist(text)

        assert result.success
        assert len(result.records) == 1
        record = result.records[0]
        assert record.code == "amecro"
        assert record.scientific_name == "Corvus brachyrhynchos"
        assert record.common_name == "American Crow"
        assert record.category is ChecklistCategory.SPECIES

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("issf", ChecklistCategory.SUBSPECIES),
            ("form", ChecklistCategory.SUBSPECIES),
            ("slash", ChecklistCategory.SLASH),
            ("hybrid", ChecklistCategory.HYBRID),
            ("intergrade", ChecklistCategory.HYBRID),
        ],
    )
    def test_category_aliases(
        self, make_checklist_csv: MakeCsv, raw: str, expected: ChecklistCategory
    ) -> None:
        text = make_checklist_csv([_row(raw, "icegul1", "Larus glaucoides kumlieni")])
        result = parse_checklist(text)
        assert result.records[0].category is expected

    def test_genus_adjustment_applied(self, make_checklist_csv: MakeCsv) -> None:
        text = make_checklist_csv([_row("species", "coohaw", "Astur cooperii", "Cooper's Hawk")])
        result = parse_checklist(text)
        assert result.records[0].scientific_name == "Accipiter cooperii"

    def test_leading_bom_ignored(self, make_checklist_csv: MakeCsv) -> None:
        text = "\ufeff" + make_checklist_csv([_row("species", "amecro", "Corvus brachyrhynchos")])
        result = parse_checklist(text)
        assert result.success
        assert len(result.records) == 1

    def test_cells_are_trimmed(self, make_checklist_csv: MakeCsv) -> None:
        text = make_checklist_csv([_row("species", " amecro ", " Corvus brachyrhynchos ")])
        result = parse_checklist(text)
        assert result.records[0].code == "amecro"
        assert result.records[0].scientific_name == "Corvus brachyrhynchos"


class TestParseChecklistSkips:
    """Rows that are counted as skipped, not errors."""

    def test_unmapped_category_skipped(self, make_checklist_csv: MakeCsv) -> None:
        text = make_checklist_csv(
            [
                _row("spuh", "gull1", "Larus sp."),
                _row("domestic", "rocpig1", "Columba livia (Domestic type)"),
                _row("species", "amecro", "Corvus brachyrhynchos"),
            ]
        )
        result = parse_checklist(text)
        assert result.success
        assert result.stats.skipped_records == 2
        assert result.stats.valid_records == 1

    @pytest.mark.parametrize(
        "name",
        ["Larus sp.", "Anser/Branta sp.", "Tyrannidae (gen. sp.)"],
    )
    def test_indeterminate_names_skipped(self, make_checklist_csv: MakeCsv, name: str) -> None:
        text = make_checklist_csv([_row("slash", "gull1", name)])
        result = parse_checklist(text)
        assert result.records == []
        assert result.errors == []
        assert result.stats.skipped_records == 1

    def test_species_only_filter(self, make_checklist_csv: MakeCsv) -> None:
        text = make_checklist_csv(
            [
                _row("species", "icegul", "Larus glaucoides"),
                _row("issf", "icegul1", "Larus glaucoides kumlieni"),
                _row("hybrid", "x00004", "Larus glaucoides x Larus thayeri"),
            ]
        )
        result = parse_checklist(text, filter_species_only=True)
        assert [r.code for r in result.records] == ["icegul"]
        assert result.stats.skipped_records == 2


class TestParseChecklistRowErrors:
    """Row-level failures do not stop the parse."""

    def test_empty_code(self, make_checklist_csv: MakeCsv) -> None:
        text = make_checklist_csv(
            [
                _row("species", "amecro", "Corvus brachyrhynchos"),
                _row("species", "", "Corvus corax"),
            ]
        )
        result = parse_checklist(text)

        assert not result.success
        assert len(result.records) == 1
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.type is ParseErrorType.EMPTY_REQUIRED_FIELD
        assert error.row == 2

    def test_invalid_scientific_name(self, make_checklist_csv: MakeCsv) -> None:
        text = make_checklist_csv([_row("species", "amecro", "corvus brachyrhynchos")])
        result = parse_checklist(text)
        assert result.errors[0].type is ParseErrorType.INVALID_SCIENTIFIC_NAME
        assert result.errors[0].value == "corvus brachyrhynchos"

    def test_invalid_code(self, make_checklist_csv: MakeCsv) -> None:
        text = make_checklist_csv([_row("species", "AMECRO", "Corvus brachyrhynchos")])
        result = parse_checklist(text)
        assert result.errors[0].type is ParseErrorType.INVALID_CODE_FORMAT
        assert result.errors[0].row == 1

    def test_stats_account_for_every_row(self, make_checklist_csv: MakeCsv) -> None:
        text = make_checklist_csv(
            [
                _row("species", "amecro", "Corvus brachyrhynchos"),
                _row("spuh", "gull1", "Larus sp."),
                _row("species", "", "Corvus corax"),
                _row("species", "BAD", "Corvus corax"),
            ]
        )
        stats = parse_checklist(text).stats
        assert stats.total_rows == 4
        assert stats.valid_records + stats.skipped_records + stats.error_records == 4


class TestParseChecklistStructural:
    """Failures that abort the whole parse."""

    def test_missing_columns(self) -> None:
        result = parse_checklist("SPECIES_CODE,SCI_NAME\namecro,Corvus brachyrhynchos\n")

        assert not result.success
        assert result.records == []
        assert result.is_structural_failure
        assert result.errors[0].type is ParseErrorType.MISSING_COLUMNS
        assert "TAXON_ORDER" in result.errors[0].message

    def test_header_only(self, make_checklist_csv: MakeCsv) -> None:
        result = parse_checklist(make_checklist_csv([]))
        assert not result.success
        assert result.errors[0].type is ParseErrorType.MALFORMED_ROW
        assert result.stats.total_rows == 0

    def test_empty_text(self) -> None:
        result = parse_checklist("")
        assert result.is_structural_failure
        assert result.errors[0].type is ParseErrorType.MISSING_COLUMNS

    def test_bad_quoting(self, make_checklist_csv: MakeCsv) -> None:
        header = make_checklist_csv([]).splitlines()[0]
        text = f'{header}\n1,species,"amecro"x,a,b,Corvus brachyrhynchos,c,d,e,\n'
        result = parse_checklist(text)
        assert result.is_structural_failure
        assert result.errors[0].type is ParseErrorType.MALFORMED_ROW
        assert result.errors[0].message == "Failed to parse CSV"
