"""Data models for feature reconciliation."""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Union

from packaging.version import Version

from constants import Constants


class OutcomeKind(Enum):
    """Tag identifying which reconciliation outcome was produced."""
    RESOLVED = "resolved"
    API_CONFLICT = "api_conflict"
    PROVIDED_CONFLICT = "provided_conflict"
    LEVEL_UNAVAILABLE = "level_unavailable"
    # Reserved: a configured feature whose version must change. Never produced.
    FEATURE_MODIFIED = "feature_modified"


@dataclass(frozen=True)
class DependencyRef:
    """A declared build dependency."""
    group_id: str
    artifact_id: str
    version: Optional[str] = None
    type: Optional[str] = None

    @property
    def coordinate(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"

    @property
    def is_pinned(self) -> bool:
        """True when the version names exactly one release (not a range)."""
        if not self.version or not self.version.strip():
            return False
        return not any(ch in self.version for ch in "[](),")


@dataclass(frozen=True)
class Level:
    """Target specification levels; None means undetermined for that axis."""
    enterprise: Optional[Version] = None
    microprofile: Optional[Version] = None

    @property
    def ee_label(self) -> Optional[str]:
        if self.enterprise is None:
            return None
        return f"ee{self.enterprise.major}"

    @property
    def mp_label(self) -> Optional[str]:
        if self.microprofile is None:
            return None
        return f"mp{self.microprofile.major}.{self.microprofile.minor}"

    @property
    def is_pinned(self) -> bool:
        return self.enterprise is not None or self.microprofile is not None

    def __str__(self) -> str:
        return (
            f"ee={self.ee_label or Constants.UNDETERMINED_LEVEL}, "
            f"mp={self.mp_label or Constants.UNDETERMINED_LEVEL}"
        )


@dataclass(frozen=True)
class Resolved:
    """Reconciliation succeeded; to_add holds features missing from the configuration."""
    to_add: FrozenSet[str] = field(default_factory=frozenset)
    kind: OutcomeKind = field(default=OutcomeKind.RESOLVED, init=False)


@dataclass(frozen=True)
class ApiConflict:
    """Application API usage contradicts configured features."""
    conflicts: FrozenSet[str]
    recommended: FrozenSet[str]
    kind: OutcomeKind = field(default=OutcomeKind.API_CONFLICT, init=False)


@dataclass(frozen=True)
class ProvidedConflict:
    """Configured features are mutually exclusive among themselves."""
    conflicts: FrozenSet[str]
    recommended: FrozenSet[str]
    kind: OutcomeKind = field(default=OutcomeKind.PROVIDED_CONFLICT, init=False)


@dataclass(frozen=True)
class LevelUnavailableConflict:
    """Some feature has no variant at a pinned target level."""
    conflicts: FrozenSet[str]
    mp_level: Optional[str]
    ee_level: Optional[str]
    remove: FrozenSet[str]
    kind: OutcomeKind = field(default=OutcomeKind.LEVEL_UNAVAILABLE, init=False)


ScanOutcome = Union[Resolved, ApiConflict, ProvidedConflict, LevelUnavailableConflict]


class FeatureGateError(Exception):
    """Base class for infrastructure errors (unreadable or malformed inputs)."""


class CatalogError(FeatureGateError):
    """Raised when feature catalog data is malformed."""


class PomParseError(FeatureGateError):
    """Raised when a pom.xml cannot be parsed."""


class ServerConfigError(FeatureGateError):
    """Raised when server configuration cannot be read."""


class ScanResultError(FeatureGateError):
    """Raised when the scanner result is missing or malformed."""
