"""Shared utilities (logging setup)."""

from birdcode_map.services.logging import configure_logging

__all__ = ["configure_logging"]
