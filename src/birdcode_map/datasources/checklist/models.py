"""Checklist taxonomy record model and column layout."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from birdcode_map.schemas import ScientificName, SpeciesCode

REQUIRED_COLUMNS: tuple[str, ...] = (
    "TAXON_ORDER",
    "CATEGORY",
    "SPECIES_CODE",
    "TAXON_CONCEPT_ID",
    "PRIMARY_COM_NAME",
    "SCI_NAME",
    "ORDER",
    "FAMILY",
    "SPECIES_GROUP",
    "REPORT_AS",
)

CODE_COLUMN = "SPECIES_CODE"
NAME_COLUMN = "SCI_NAME"
COMMON_NAME_COLUMN = "PRIMARY_COM_NAME"
CATEGORY_COLUMN = "CATEGORY"


class ChecklistCategory(StrEnum):
    """Taxon categories that can carry a banding-code identity."""

    SPECIES = "species"
    SUBSPECIES = "subspecies"
    SLASH = "slash"
    HYBRID = "hybrid"


# Raw CATEGORY values -> model category. Anything absent (spuh, domestic)
# has no identity to map and is skipped.
CATEGORY_ALIASES: dict[str, ChecklistCategory] = {
    "species": ChecklistCategory.SPECIES,
    "issf": ChecklistCategory.SUBSPECIES,
    "form": ChecklistCategory.SUBSPECIES,
    "slash": ChecklistCategory.SLASH,
    "hybrid": ChecklistCategory.HYBRID,
    "intergrade": ChecklistCategory.HYBRID,
}


@dataclass(frozen=True)
class ChecklistRawRecord:
    """One validated checklist row."""

    category: ChecklistCategory
    code: SpeciesCode
    scientific_name: ScientificName
    common_name: str
