"""Banding-code authority record model and column layout."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from birdcode_map.schemas import Alpha4Code, ScientificName

REQUIRED_COLUMNS: tuple[str, ...] = ("SP", "SPEC", "COMMONNAME", "SCINAME", "SPEC6")

SUBSPECIES_COLUMN = "SP"
CODE_COLUMN = "SPEC"
COMMON_NAME_COLUMN = "COMMONNAME"
NAME_COLUMN = "SCINAME"
SECONDARY_CODE_COLUMN = "SPEC6"

# SP column value marking a subspecies or morph row.
SUBSPECIES_MARKER = "+"


@dataclass(frozen=True)
class BandingRawRecord:
    """One validated banding-list row."""

    alpha4: Alpha4Code
    scientific_name: ScientificName
    common_name: str
    secondary_code: str = ""
