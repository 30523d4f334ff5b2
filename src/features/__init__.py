"""Feature reconciliation core."""

from .catalog import FeatureCatalog, load_catalog
from .engine import ReconciliationEngine
from .levels import LevelDetector
from .messages import format_outcome
from .models import (
    ApiConflict,
    DependencyRef,
    Level,
    LevelUnavailableConflict,
    OutcomeKind,
    ProvidedConflict,
    Resolved,
    ScanOutcome,
)
from .output import OutputComputer

__all__ = [
    "FeatureCatalog",
    "load_catalog",
    "ReconciliationEngine",
    "LevelDetector",
    "format_outcome",
    "ApiConflict",
    "DependencyRef",
    "Level",
    "LevelUnavailableConflict",
    "OutcomeKind",
    "ProvidedConflict",
    "Resolved",
    "ScanOutcome",
    "OutputComputer",
]
