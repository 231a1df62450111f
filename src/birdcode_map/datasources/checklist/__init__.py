"""Checklist taxonomy source (eBird-style species checklist).

Public API:
  - models: ChecklistCategory, ChecklistRawRecord, REQUIRED_COLUMNS
  - parser: parse_checklist
"""

from birdcode_map.datasources.checklist.models import (
    REQUIRED_COLUMNS,
    ChecklistCategory,
    ChecklistRawRecord,
)
from birdcode_map.datasources.checklist.parser import parse_checklist

__all__ = [
    "REQUIRED_COLUMNS",
    "ChecklistCategory",
    "ChecklistRawRecord",
    "parse_checklist",
]
