"""
Domain types for birdcode-map.

Validated code/name types and the canonical mapping record. These define the
output schema; parsers and the transformer normalize source rows into them.
"""

from __future__ import annotations

import re
from datetime import datetime
from enum import StrEnum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from birdcode_map.errors import InvalidValueError

# =============================================================================
# Validated string types
# =============================================================================

ALPHA4_PATTERN = re.compile(r"^[A-Z]{4}$")
SPECIES_CODE_PATTERN = re.compile(r"^[a-z0-9xy]{4,8}$")

_EPITHET = r"[a-z]+(?:-[a-z]+)?"
SIMPLE_NAME_PATTERN = re.compile(rf"^[A-Z][a-z]+ {_EPITHET}(?: {_EPITHET})?$")
_COMPOUND_HEAD = re.compile(r"^[A-Z][a-z]+[ /]\S")
_OTHER_WHITESPACE = re.compile(r"[^\S ]")
_BINOMIAL_PREFIX = re.compile(r"^([A-Z][a-z]+) (\S+)(?= |\Z)")

HYBRID_MARKER = " x "
SLASH_MARKER = "/"


class _ValidatedStr(str):
    """A ``str`` whose constructor rejects values that fail ``is_valid``."""

    __slots__ = ()

    hint: ClassVar[str] = ""

    def __new__(cls, value: str) -> _ValidatedStr:
        if not isinstance(value, str) or not cls.is_valid(value):
            raise InvalidValueError(cls.__name__, str(value), cls.hint)
        return super().__new__(cls, value)

    @classmethod
    def is_valid(cls, value: str) -> bool:
        raise NotImplementedError


class Alpha4Code(_ValidatedStr):
    """Four-letter uppercase banding code, e.g. ``AMCR``."""

    __slots__ = ()

    hint = "Must be exactly 4 uppercase letters A-Z."

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return bool(ALPHA4_PATTERN.fullmatch(value))


class SpeciesCode(_ValidatedStr):
    """Checklist species slug, e.g. ``amecro``."""

    __slots__ = ()

    hint = "Must be 4-8 characters: lowercase letters, digits, x/y."

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return bool(SPECIES_CODE_PATTERN.fullmatch(value))


class ScientificName(_ValidatedStr):
    """Scientific name in binomial, trinomial, hybrid or slash form."""

    __slots__ = ()

    hint = 'Expected "Genus species", "Genus species subspecies", or a hybrid/slash form.'

    @classmethod
    def is_valid(cls, value: str) -> bool:
        if SIMPLE_NAME_PATTERN.fullmatch(value):
            return True
        return is_compound_name(value)

    @property
    def binomial(self) -> str | None:
        return binomial_of(self)


def is_compound_name(value: str) -> bool:
    """True for a well-formed hybrid (``A x B``) or slash (``A / B``) name.

    Compound names are accepted even when their parts do not have strict
    binomial shape; they only need a capitalised genus up front, one of the
    markers, and clean single spacing.
    """
    if HYBRID_MARKER not in value and SLASH_MARKER not in value:
        return False
    if value != value.strip() or "  " in value or _OTHER_WHITESPACE.search(value):
        return False
    return bool(_COMPOUND_HEAD.match(value))


def binomial_of(name: str) -> str | None:
    """Return the first two space-separated tokens of a name, or None.

    ``Larus glaucoides kumlieni`` -> ``Larus glaucoides``. A slash name such
    as ``Accipiter striatus/cooperii`` is already two tokens and comes back
    whole.
    """
    match = _BINOMIAL_PREFIX.match(name)
    if match is None:
        return None
    return f"{match.group(1)} {match.group(2)}"


# =============================================================================
# Canonical mapping record
# =============================================================================


class CommonNameSource(StrEnum):
    """Which registry's common name wins when the two disagree."""

    CHECKLIST = "checklist"
    BANDING = "banding"


def is_iso_timestamp(value: str) -> bool:
    """True if ``value`` parses as an ISO-8601 date or datetime."""
    if not value:
        return False
    try:
        datetime.fromisoformat(value)
    except ValueError:
        return False
    return True


class MappingRecord(BaseModel):
    """One alpha4 <-> species-code mapping, the unit of the output artifact."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    alpha4: str = Field(..., min_length=1, pattern=ALPHA4_PATTERN.pattern)
    code: str = Field(..., min_length=1, pattern=SPECIES_CODE_PATTERN.pattern)
    common_name: str = Field(..., min_length=1)
    scientific_name: str = Field(..., min_length=1)
    source: str = Field(..., min_length=1)
    source_version: str = Field(..., min_length=1)
    updated_at: str = Field(..., min_length=1, description="ISO-8601 timestamp")

    @field_validator("scientific_name")
    @classmethod
    def _check_scientific_name(cls, value: str) -> str:
        if not ScientificName.is_valid(value):
            msg = f"Invalid scientific name format: {value}"
            raise ValueError(msg)
        return value

    @field_validator("updated_at")
    @classmethod
    def _check_updated_at(cls, value: str) -> str:
        if not is_iso_timestamp(value):
            msg = f"Invalid ISO date format: {value}"
            raise ValueError(msg)
        return value


# =============================================================================
# Operation results
# =============================================================================


class Result(BaseModel):
    """Generic result wrapper for CLI-level operations."""

    success: bool
    message: str
    data: dict[str, Any] | None = None
    error: str | None = None


class BuildResult(BaseModel):
    """What a mapping build hands back to its caller."""

    output_path: str
    record_count: int
    map_version: str
