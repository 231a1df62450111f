"""
Prefect flows for the mapping pipeline.

Flows:
- build: Parse both registries, join, transform, and write map-<version>.json

Usage (local):
    python -m birdcode_map.flows.build

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    python -m birdcode_map.flows.build
"""
