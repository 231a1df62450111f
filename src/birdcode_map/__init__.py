"""Birdcode Map - banding alpha code <-> checklist species code reconciliation.

Architecture::

    datasources/   Source registries (checklist taxonomy, banding code list) -> validated records
    reference/     Versioned genus-correction table
    normalize.py   Scientific-name normalizer built from a correction table
    analysis/      Cross-source logic (variant-aware join, mapping transform, diagnostics)
    store.py       Write-once, versioned map artifacts (map-<version>.json)
    flows/         Prefect orchestration (build parses, joins, transforms, writes)
    services/      Shared utilities (logging setup)

Data flow: datasources -> normalize -> analysis.join -> analysis.transform -> store

Extension points, see each package's docstring for step-by-step guides:
  - New source registry:  datasources/__init__.py
  - New correction set:   reference/__init__.py
  - New analysis:         analysis/__init__.py
"""

__version__ = "0.1.0"

from birdcode_map.config import Settings
from birdcode_map.schemas import MappingRecord

__all__ = ["MappingRecord", "Settings", "__version__"]
