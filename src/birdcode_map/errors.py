"""Exception types raised at the package boundary.

Parsers, the join engine and the transformer report problems inside their
result objects. Exceptions are reserved for invalid values handed to a
validated type and for caller-supplied build configuration that cannot work.
"""

from __future__ import annotations


class BirdcodeMapError(Exception):
    """Base class for all birdcode-map errors."""


class InvalidValueError(BirdcodeMapError, ValueError):
    """Raised when a value does not satisfy a validated type's format."""

    def __init__(self, type_name: str, value: str, hint: str) -> None:
        self.type_name = type_name
        self.value = value
        super().__init__(f"Invalid {type_name} format: {value!r}. {hint}")


class BuildConfigurationError(BirdcodeMapError):
    """Raised when build inputs or run metadata are unusable."""


class InvalidMapVersionError(BuildConfigurationError):
    """Raised when a map version is not a CalVer string."""


class SourceNotFoundError(BuildConfigurationError):
    """Raised when a source file does not exist."""


class SourceFormatError(BuildConfigurationError):
    """Raised when a source cannot be parsed at all (missing columns, bad quoting)."""


class ArtifactExistsError(BuildConfigurationError):
    """Raised when a map artifact for the requested version already exists."""
