"""
Application settings.

Values come from ``BIRDCODE_*`` environment variables (or a local ``.env``),
falling back to the defaults below. Source paths follow the raw-data layout
``data/raw/<source>/<file>-<year>.csv``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from birdcode_map.schemas import CommonNameSource

DEFAULT_DATA_YEAR = 2024


class Settings(BaseSettings):
    """Runtime configuration for builds and the CLI."""

    model_config = SettingsConfigDict(
        env_prefix="BIRDCODE_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "birdcode-map"
    app_env: str = "development"
    debug: bool = False

    data_dir: Path = Path("data")
    data_year: int = DEFAULT_DATA_YEAR
    checklist_path: Path | None = Field(default=None, description="Checklist taxonomy CSV")
    banding_path: Path | None = Field(default=None, description="Banding code list CSV")
    output_dir: Path | None = None

    map_version: str | None = None
    preferred_common_name_source: CommonNameSource = CommonNameSource.CHECKLIST

    @property
    def raw_dir(self) -> Path:
        return self.data_dir / "raw"

    @property
    def resolved_checklist_path(self) -> Path:
        if self.checklist_path is not None:
            return self.checklist_path
        return self.raw_dir / "ebird" / f"ebird-taxonomy-{self.data_year}.csv"

    @property
    def resolved_banding_path(self) -> Path:
        if self.banding_path is not None:
            return self.banding_path
        return self.raw_dir / "ibp-aos" / f"ibp-aos-list-{self.data_year}.csv"

    @property
    def resolved_output_dir(self) -> Path:
        return self.output_dir if self.output_dir is not None else self.data_dir / "mapping"


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
