"""Diagnostic messages for reconciliation conflicts.

Pure functions from an outcome to user-facing text; the engine never builds
strings itself.
"""

from typing import Iterable, Optional

from constants import Constants
from .models import (
    ApiConflict,
    LevelUnavailableConflict,
    OutcomeKind,
    ProvidedConflict,
    ScanOutcome,
)

API_CONFLICT_MESSAGE = (
    "A working set of features could not be generated due to conflicts between configured "
    "features and the application's API usage: {conflicts}. Review and update your server "
    "configuration and application to ensure they are not using conflicting features and APIs "
    "from different levels of MicroProfile, Java EE, or Jakarta EE. Refer to the following set "
    "of suggested features for guidance: {recommended}."
)

PROVIDED_CONFLICT_MESSAGE = (
    "A working set of features could not be generated due to conflicts between configured "
    "features: {conflicts}. Review and update your server configuration to ensure it is not "
    "using conflicting features from different levels of MicroProfile, Java EE, or Jakarta EE. "
    "Refer to the following set of suggested features for guidance: {recommended}."
)

LEVEL_UNAVAILABLE_MESSAGE = (
    "The features {conflicts} are not available together with MicroProfile {mp_level} and "
    "Java EE or Jakarta EE {ee_level}. Remove the following features from your server "
    "configuration or change the targeted MicroProfile and Java EE or Jakarta EE levels: {remove}."
)

LEVEL_UNAVAILABLE_API_MESSAGE = (
    "The application's API usage requires features {conflicts} that are not available with "
    "MicroProfile {mp_level} and Java EE or Jakarta EE {ee_level}. Change the targeted "
    "MicroProfile and Java EE or Jakarta EE levels to ones that support these features."
)


def format_set(names: Iterable[str]) -> str:
    """Render names sorted and bracketed, e.g. [cdi-1.2, servlet-5.0]."""
    return "[" + ", ".join(sorted(names, key=lambda n: (n.lower(), n))) + "]"


def _level(label: Optional[str]) -> str:
    return label or Constants.UNDETERMINED_LEVEL


def format_api_conflict(outcome: ApiConflict) -> str:
    return API_CONFLICT_MESSAGE.format(
        conflicts=format_set(outcome.conflicts),
        recommended=format_set(outcome.recommended),
    )


def format_provided_conflict(outcome: ProvidedConflict) -> str:
    return PROVIDED_CONFLICT_MESSAGE.format(
        conflicts=format_set(outcome.conflicts),
        recommended=format_set(outcome.recommended),
    )


def format_level_unavailable(outcome: LevelUnavailableConflict) -> str:
    template = LEVEL_UNAVAILABLE_MESSAGE if outcome.remove else LEVEL_UNAVAILABLE_API_MESSAGE
    return template.format(
        conflicts=format_set(outcome.conflicts),
        mp_level=_level(outcome.mp_level),
        ee_level=_level(outcome.ee_level),
        remove=format_set(outcome.remove),
    )


_FORMATTERS = {
    OutcomeKind.API_CONFLICT: format_api_conflict,
    OutcomeKind.PROVIDED_CONFLICT: format_provided_conflict,
    OutcomeKind.LEVEL_UNAVAILABLE: format_level_unavailable,
}


def format_outcome(outcome: ScanOutcome) -> Optional[str]:
    """Return the diagnostic for a conflict outcome, or None when resolved."""
    formatter = _FORMATTERS.get(outcome.kind)
    if formatter is None:
        return None
    return formatter(outcome)
