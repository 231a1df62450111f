"""Static reconciliation data.

Reference data that doesn't change between builds: the versioned genus
correction table.

Adding a new rule set:
1. Add a new ``GenusAdjustmentSet`` constant in ``reference/genus_adjustments.py``
2. Point ``ACTIVE_GENUS_ADJUSTMENTS`` at it once both sources agree on the data year
3. Re-export from this ``__init__.py``
"""

from birdcode_map.reference.genus_adjustments import (
    ACTIVE_GENUS_ADJUSTMENTS as ACTIVE_GENUS_ADJUSTMENTS,
)
from birdcode_map.reference.genus_adjustments import GENUS_ADJUSTMENTS_V1 as GENUS_ADJUSTMENTS_V1
from birdcode_map.reference.genus_adjustments import GenusAdjustmentRule as GenusAdjustmentRule
from birdcode_map.reference.genus_adjustments import GenusAdjustmentSet as GenusAdjustmentSet
