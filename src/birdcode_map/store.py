"""Versioned, write-once store for mapping artifacts.

Each build writes ``map-<version>.json``: a plain JSON array of mapping
records, which is what the lookup service loads. Provenance (source, run
stats, adjustment-set version) lives in a sidecar ``map-<version>.json.meta.json``
so the artifact itself stays a bare array.

Writes are atomic: content goes to a temp file in the target directory and is
moved into place with ``os.replace``, so readers see either the full artifact
or nothing. An existing version is never overwritten; a later build must use
a new version string.
"""

from __future__ import annotations

import json
import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003
from typing import Any

from birdcode_map.errors import ArtifactExistsError, InvalidMapVersionError
from birdcode_map.schemas import MappingRecord
from birdcode_map.versioning import (
    is_valid_map_version,
    map_filename,
    parse_map_version_from_filename,
    sort_map_versions,
)


class MapStore:
    """Reads and writes map artifacts under one directory."""

    def __init__(self, base_dir: Path) -> None:
        self.base = base_dir

    def map_path(self, version: str) -> Path:
        if not is_valid_map_version(version):
            msg = f"Invalid map version (expected YYYY.MM[.DD][-hotfix.N]): {version}"
            raise InvalidMapVersionError(msg)
        return self._resolve(Path(map_filename(version)))

    def meta_path(self, version: str) -> Path:
        full = self.map_path(version)
        return full.with_suffix(full.suffix + ".meta.json")

    def exists(self, version: str) -> bool:
        return self.map_path(version).exists()

    def write_map(
        self,
        version: str,
        records: list[MappingRecord],
        source: str,
        **params: Any,
    ) -> Path:
        """Write an artifact and its metadata sidecar.

        Args:
            version: CalVer map version; names the file.
            records: Fully validated mapping records, in output order.
            source: Producer identifier stored in the sidecar.
            **params: Extra sidecar fields (run stats, adjustment version, ...).

        Returns:
            Absolute path of the written artifact.

        Raises:
            ArtifactExistsError: An artifact for ``version`` is already present.
        """
        full = self.map_path(version)
        if full.exists():
            msg = f"Map artifact already exists for version {version}: {full}"
            raise ArtifactExistsError(msg)
        full.parent.mkdir(parents=True, exist_ok=True)

        meta: dict[str, Any] = {
            "source": source,
            "map_version": version,
            "record_count": len(records),
            "written_at": datetime.now(UTC).isoformat(),
        }
        if params:
            meta.update(params)

        payload = [record.model_dump(mode="json") for record in records]
        self._atomic_write(full, payload)
        self._atomic_write(self.meta_path(version), {"meta": meta})
        return full

    def read_map(self, version: str) -> list[MappingRecord] | None:
        """Load an artifact's records, or None if the version is absent."""
        full = self.map_path(version)
        if not full.exists():
            return None
        with full.open(encoding="utf-8") as f:
            payload: list[dict[str, Any]] = json.load(f)
        return [MappingRecord.model_validate(item) for item in payload]

    def read_meta(self, version: str) -> dict[str, Any]:
        """Sidecar metadata for a version; empty if there is none."""
        sidecar = self.meta_path(version)
        if not sidecar.exists():
            return {}
        with sidecar.open(encoding="utf-8") as f:
            result: dict[str, Any] = json.load(f)
        return result.get("meta", {})

    def list_versions(self) -> list[str]:
        """Versions with an artifact on disk, oldest first."""
        if not self.base.exists():
            return []
        versions = [
            v
            for child in self.base.iterdir()
            if child.is_file() and (v := parse_map_version_from_filename(child.name)) is not None
        ]
        return sort_map_versions(versions)

    def latest_version(self) -> str | None:
        versions = self.list_versions()
        return versions[-1] if versions else None

    def _resolve(self, path: Path) -> Path:
        full = self.base / path if not path.is_absolute() else path
        try:
            full.resolve().relative_to(self.base.resolve())
        except ValueError:
            msg = f"Path escapes store base directory: {path}"
            raise ValueError(msg) from None
        return full

    @staticmethod
    def _atomic_write(target: Path, data: Any) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.write("\n")
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
