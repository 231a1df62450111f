"""Versioned genus-correction table.

Each rule maps a scientific name as one registry spells it to the name both
registries are reconciled on. Data only; the lookup logic lives in
``birdcode_map.normalize``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GenusAdjustmentRule:
    """One name correction, tagged with the source data versions it was seen in."""

    from_name: str
    to_name: str
    reason: str
    checklist_version: str
    banding_version: str


@dataclass(frozen=True)
class GenusAdjustmentSet:
    """An immutable, versioned collection of adjustment rules."""

    version: str  # vMAJOR.MINOR.PATCH
    checklist_data_version: str
    banding_data_version: str
    rules: tuple[GenusAdjustmentRule, ...]


# eBird 2024 moved several Accipiter hawks to Astur; the IBP 2024 list keeps
# Accipiter. Reconcile on Accipiter.
GENUS_ADJUSTMENTS_V1 = GenusAdjustmentSet(
    version="v1.1.0",
    checklist_data_version="2024",
    banding_data_version="2024",
    rules=(
        GenusAdjustmentRule(
            from_name="Astur cooperii",
            to_name="Accipiter cooperii",
            reason="Checklist moved Cooper's Hawk to Astur; banding list retains Accipiter",
            checklist_version="2024",
            banding_version="2024",
        ),
        GenusAdjustmentRule(
            from_name="Astur bicolor",
            to_name="Accipiter bicolor",
            reason="Genus reassignment consistency for Bicolored Hawk",
            checklist_version="2024",
            banding_version="2024",
        ),
        GenusAdjustmentRule(
            from_name="Astur chilensis",
            to_name="Accipiter chilensis",
            reason="Genus reassignment consistency for Chilean Hawk",
            checklist_version="2024",
            banding_version="2024",
        ),
        GenusAdjustmentRule(
            from_name="Astur gundlachi",
            to_name="Accipiter gundlachi",
            reason="Genus reassignment consistency for Gundlach's Hawk",
            checklist_version="2024",
            banding_version="2024",
        ),
        GenusAdjustmentRule(
            from_name="Astur gentilis",
            to_name="Accipiter gentilis",
            reason="Genus reassignment consistency for Eurasian Goshawk",
            checklist_version="2024",
            banding_version="2024",
        ),
    ),
)

ACTIVE_GENUS_ADJUSTMENTS = GENUS_ADJUSTMENTS_V1
