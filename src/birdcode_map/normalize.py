"""Scientific-name normalization.

Applies a versioned genus-correction table to raw names so that nomenclature
drift between the two registries (e.g. a genus reassignment adopted by one
list but not the other) does not surface as a validation failure or a missed
match. Runs before any name validation.
"""

from __future__ import annotations

import logging
import re
from types import MappingProxyType

from birdcode_map.reference.genus_adjustments import (
    ACTIVE_GENUS_ADJUSTMENTS,
    GenusAdjustmentSet,
)

log = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


class ScientificNameNormalizer:
    """Exact-match name corrector built from one ``GenusAdjustmentSet``.

    At most one substitution is applied per call. Rule sets that chain (a
    rule's target is another rule's source) or that map one name to two
    targets are rejected at construction, which keeps normalization
    idempotent.
    """

    def __init__(self, adjustments: GenusAdjustmentSet) -> None:
        table: dict[str, str] = {}
        for rule in adjustments.rules:
            existing = table.get(rule.from_name)
            if existing is not None and existing != rule.to_name:
                msg = (
                    f"Conflicting adjustments for {rule.from_name!r}: "
                    f"{existing!r} vs {rule.to_name!r}"
                )
                raise ValueError(msg)
            table[rule.from_name] = rule.to_name

        chained = sorted(set(table.values()) & set(table))
        if chained:
            msg = f"Adjustment set {adjustments.version} chains through: {', '.join(chained)}"
            raise ValueError(msg)

        self.adjustments = adjustments
        self._table = MappingProxyType(table)
        log.debug(
            "Loaded genus adjustments %s (%d rules)", adjustments.version, len(table)
        )

    @property
    def version(self) -> str:
        return self.adjustments.version

    def normalize(self, name: str) -> str:
        """Collapse whitespace, then apply the matching correction if any."""
        cleaned = _WHITESPACE.sub(" ", name).strip()
        return self._table.get(cleaned, cleaned)

    __call__ = normalize


default_normalizer = ScientificNameNormalizer(ACTIVE_GENUS_ADJUSTMENTS)
