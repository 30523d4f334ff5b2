"""Feature reconciliation engine.

Merges configured features, scanner-recommended features and target levels
into a single decision. Checks run in priority order and the first failure
wins:

1. level availability (configured or recommended feature missing at a pinned level)
2. provided conflict (configured features exclude each other)
3. API conflict (recommended features exclude configured ones)

Otherwise the outcome is Resolved with the recommended features that are not
already configured. Competing variants are never merged or upgraded.
"""

from __future__ import annotations

import itertools
import logging
from typing import FrozenSet, Iterable, Optional

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from .catalog import FeatureCatalog
from .models import (
    ApiConflict,
    LevelUnavailableConflict,
    Level,
    ProvidedConflict,
    Resolved,
    ScanOutcome,
)
from .parser import feature_key, normalize_features

logger = logging.getLogger(__name__)


def _missing(recommended: FrozenSet[str], configured: FrozenSet[str]) -> FrozenSet[str]:
    """Recommended features not already configured, ignoring case."""
    present = {feature_key(f) for f in configured}
    return frozenset(f for f in recommended if feature_key(f) not in present)


class ReconciliationEngine:
    """Decides which features to add, or why no consistent set exists."""

    def __init__(self, catalog: FeatureCatalog):
        self._catalog = catalog

    @property
    def catalog(self) -> FeatureCatalog:
        return self._catalog

    def reconcile(
        self,
        configured: Iterable[str],
        recommended: Iterable[str],
        level: Optional[Level] = None,
    ) -> ScanOutcome:
        """Reconcile one build's inputs.

        Args:
            configured: Version-qualified features declared by the user.
            recommended: Version-qualified features inferred by the scanner.
            level: Target levels; None means both axes undetermined.

        Returns:
            Exactly one ScanOutcome variant.
        """
        configured_set = normalize_features(configured)
        recommended_set = normalize_features(recommended)
        level = level or Level()

        if is_debug_enabled(logger):
            logger.debug(
                "Reconciling features",
                extra=extra_context(
                    event="function_entry",
                    component="engine",
                    action="reconcile",
                    configured=sorted(configured_set),
                    recommended=sorted(recommended_set),
                    level=str(level),
                ),
            )

        outcome = (
            self._check_levels(configured_set, recommended_set, level)
            or self._check_provided(configured_set, recommended_set)
            or self._check_api(configured_set, recommended_set)
            or Resolved(to_add=_missing(recommended_set, configured_set))
        )

        logger.info("%s Reconciliation outcome: %s.", Constants.ANALYSIS, outcome.kind.value)
        if is_debug_enabled(logger):
            logger.debug(
                "Reconciliation finished",
                extra=extra_context(
                    event="function_exit",
                    component="engine",
                    action="reconcile",
                    outcome=outcome.kind.value,
                ),
            )
        return outcome

    def _check_levels(
        self, configured: FrozenSet[str], recommended: FrozenSet[str], level: Level
    ) -> Optional[LevelUnavailableConflict]:
        if not level.is_pinned:
            return None

        def unavailable(feature: str) -> bool:
            return not self._catalog.exists_at(self._catalog.short_name(feature), level)

        bad_configured = {f for f in configured if unavailable(f)}
        bad_recommended = {f for f in recommended if unavailable(f)}
        if not bad_configured and not bad_recommended:
            return None

        return LevelUnavailableConflict(
            conflicts=frozenset(configured | recommended),
            mp_level=level.mp_label,
            ee_level=level.ee_label,
            remove=frozenset(self._catalog.short_name(f) for f in bad_configured),
        )

    def _check_provided(
        self, configured: FrozenSet[str], recommended: FrozenSet[str]
    ) -> Optional[ProvidedConflict]:
        implicated = set()
        for a, b in itertools.combinations(sorted(configured), 2):
            if self._catalog.conflicts_with(a, b):
                implicated.update((a, b))
        if not implicated:
            return None
        return ProvidedConflict(conflicts=frozenset(implicated), recommended=recommended)

    def _check_api(
        self, configured: FrozenSet[str], recommended: FrozenSet[str]
    ) -> Optional[ApiConflict]:
        clashing = {
            c for c in configured
            if any(self._catalog.conflicts_with(c, r) for r in recommended)
        }
        if not clashing:
            return None
        return ApiConflict(conflicts=frozenset(clashing | recommended), recommended=recommended)
