"""Banding-code authority source (IBP/AOS-style alpha code list).

Public API:
  - models: BandingRawRecord, REQUIRED_COLUMNS, SUBSPECIES_MARKER
  - parser: parse_banding
"""

from birdcode_map.datasources.banding.models import (
    REQUIRED_COLUMNS,
    SUBSPECIES_MARKER,
    BandingRawRecord,
)
from birdcode_map.datasources.banding.parser import parse_banding

__all__ = [
    "REQUIRED_COLUMNS",
    "SUBSPECIES_MARKER",
    "BandingRawRecord",
    "parse_banding",
]
