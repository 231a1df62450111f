"""Tests for the banding-code list parser."""

from __future__ import annotations

from collections.abc import Callable

from birdcode_map.datasources.banding import SUBSPECIES_MARKER, parse_banding
from birdcode_map.datasources.common import ParseErrorType, is_indeterminate, strip_bom

MakeCsv = Callable[[list[dict[str, str]]], str]


def _row(alpha4: str, name: str, common: str = "", sp: str = "", spec6: str = "") -> dict[str, str]:
    return {"alpha4": alpha4, "name": name, "common": common, "sp": sp, "spec6": spec6}


class TestParseBanding:
    """Valid rows and skips."""

    def test_valid_row(self, make_banding_csv: MakeCsv) -> None:
        text = make_banding_csv([_row("AMCR", "Corvus brachyrhynchos", "American Crow", spec6="CORBRA")])
        result = parse_banding(text)

        assert result.success
        record = result.records[0]
        assert record.alpha4 == "AMCR"
        assert record.scientific_name == "Corvus brachyrhynchos"
        assert record.common_name == "American Crow"
        assert record.secondary_code == "CORBRA"

    def test_subspecies_rows_kept_by_default(self, make_banding_csv: MakeCsv) -> None:
        text = make_banding_csv(
            [
                _row("ICGU", "Larus glaucoides"),
                _row("KUGU", "Larus glaucoides kumlieni", sp=SUBSPECIES_MARKER),
            ]
        )
        assert len(parse_banding(text).records) == 2

    def test_exclude_subspecies(self, make_banding_csv: MakeCsv) -> None:
        text = make_banding_csv(
            [
                _row("ICGU", "Larus glaucoides"),
                _row("KUGU", "Larus glaucoides kumlieni", sp=SUBSPECIES_MARKER),
            ]
        )
        result = parse_banding(text, exclude_subspecies=True)
        assert [r.alpha4 for r in result.records] == ["ICGU"]
        assert result.stats.skipped_records == 1

    def test_genus_adjustment_applied(self, make_banding_csv: MakeCsv) -> None:
        text = make_banding_csv([_row("NOGO", "Astur gentilis", "Northern Goshawk")])
        assert parse_banding(text).records[0].scientific_name == "Accipiter gentilis"

    def test_indeterminate_skipped(self, make_banding_csv: MakeCsv) -> None:
        text = make_banding_csv([_row("UNGU", "Larus sp.", "unidentified gull")])
        result = parse_banding(text)
        assert result.records == []
        assert result.stats.skipped_records == 1
        assert result.success


class TestParseBandingErrors:
    """Row and structural failures."""

    def test_invalid_alpha4(self, make_banding_csv: MakeCsv) -> None:
        text = make_banding_csv([_row("AMC", "Corvus brachyrhynchos")])
        result = parse_banding(text)
        assert not result.success
        assert result.errors[0].type is ParseErrorType.INVALID_ALPHA4_CODE
        assert result.errors[0].message == "Invalid Alpha4Code format: AMC"

    def test_name_checked_before_code(self, make_banding_csv: MakeCsv) -> None:
        text = make_banding_csv([_row("amc", "corvus")])
        assert parse_banding(text).errors[0].type is ParseErrorType.INVALID_SCIENTIFIC_NAME

    def test_empty_name(self, make_banding_csv: MakeCsv) -> None:
        text = make_banding_csv([_row("AMCR", "")])
        result = parse_banding(text)
        assert result.errors[0].type is ParseErrorType.EMPTY_REQUIRED_FIELD
        assert result.errors[0].value == "AMCR"

    def test_missing_columns(self) -> None:
        result = parse_banding("SPEC,SCINAME\nAMCR,Corvus brachyrhynchos\n")
        assert result.is_structural_failure
        assert result.errors[0].type is ParseErrorType.MISSING_COLUMNS
        assert result.errors[0].row == 0

    def test_header_only(self, make_banding_csv: MakeCsv) -> None:
        result = parse_banding(make_banding_csv([]))
        assert result.errors[0].type is ParseErrorType.MALFORMED_ROW


class TestTextHelpers:
    """BOM and indeterminate-name helpers."""

    def test_strip_repeated_bom(self) -> None:
        assert strip_bom("\ufeff\ufeffSP,SPEC") == "SP,SPEC"

    def test_strip_bom_noop(self) -> None:
        assert strip_bom("SP,SPEC") == "SP,SPEC"

    def test_indeterminate(self) -> None:
        assert is_indeterminate("Larus sp.")
        assert is_indeterminate("Tyrannidae (gen. sp.)")
        assert not is_indeterminate("Larus spinosus")
        assert not is_indeterminate("Corvus brachyrhynchos")
