"""CalVer map versions: ``YYYY.MM[.DD][-hotfix.N]``.

Artifacts are named ``map-<version>.json``. Ordering treats a missing day or
hotfix as 0, so ``2024.09`` < ``2024.09.01`` < ``2024.09.01-hotfix.1``.
"""

from __future__ import annotations

import re
from typing import NamedTuple

CALVER_PATTERN = re.compile(r"^(\d{4})\.\d{2}(?:\.\d{2})?(?:-hotfix\.\d+)?$")
MAP_FILENAME_PATTERN = re.compile(r"^map-(\d{4}\.\d{2}(?:\.\d{2})?(?:-hotfix\.\d+)?)\.json$")
_CALVER_PARTS = re.compile(r"^(\d{4})\.(\d{2})(?:\.(\d{2}))?(?:-hotfix\.(\d+))?$")


class VersionSortKey(NamedTuple):
    year: int
    month: int
    day: int
    hotfix: int


def is_valid_map_version(version: str) -> bool:
    return bool(CALVER_PATTERN.fullmatch(version))


def map_filename(version: str) -> str:
    return f"map-{version}.json"


def parse_map_version_from_filename(filename: str) -> str | None:
    """``map-2024.09.json`` -> ``2024.09``; None for anything else."""
    match = MAP_FILENAME_PATTERN.fullmatch(filename)
    return match.group(1) if match else None


def map_version_sort_key(version: str) -> VersionSortKey | None:
    match = _CALVER_PARTS.fullmatch(version)
    if match is None:
        return None
    year, month, day, hotfix = match.groups()
    return VersionSortKey(int(year), int(month), int(day or 0), int(hotfix or 0))


def sort_map_versions(versions: list[str]) -> list[str]:
    """Valid versions oldest first; invalid ones are dropped."""
    keyed = [(key, v) for v in versions if (key := map_version_sort_key(v)) is not None]
    return [v for _, v in sorted(keyed)]


def latest_map_version(filenames: list[str]) -> str | None:
    """Newest version among ``map-<version>.json`` filenames, or None."""
    versions = [v for f in filenames if (v := parse_map_version_from_filename(f)) is not None]
    ordered = sort_map_versions(versions)
    return ordered[-1] if ordered else None
