"""Target specification level detection from declared build dependencies."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from packaging.version import InvalidVersion, Version

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants, PlatformAxis
from .models import DependencyRef, Level

logger = logging.getLogger(__name__)


class LevelDetector:
    """Derives (enterprise, microprofile) levels from a dependency list.

    Per axis: a pinned platform dependency fixes the level; an umbrella
    dependency alone, or no marker at all, leaves the axis undetermined.
    """

    def __init__(
        self,
        enterprise_markers: Optional[Iterable[str]] = None,
        microprofile_markers: Optional[Iterable[str]] = None,
        umbrella_groups: Optional[Iterable[str]] = None,
    ):
        self._markers = {
            PlatformAxis.ENTERPRISE: frozenset(
                enterprise_markers if enterprise_markers is not None else Constants.ENTERPRISE_MARKERS
            ),
            PlatformAxis.MICROPROFILE: frozenset(
                microprofile_markers if microprofile_markers is not None else Constants.MICROPROFILE_MARKERS
            ),
        }
        self._umbrella_groups = frozenset(
            umbrella_groups if umbrella_groups is not None else Constants.UMBRELLA_GROUPS
        )

    def detect(self, dependencies: Sequence[DependencyRef]) -> Level:
        """Return the target level pair for the given dependencies."""
        deps = list(dependencies or [])
        level = Level(
            enterprise=self._detect_axis(deps, PlatformAxis.ENTERPRISE),
            microprofile=self._detect_axis(deps, PlatformAxis.MICROPROFILE),
        )
        logger.info("%s Target levels: %s.", Constants.ANALYSIS, level)
        return level

    def is_umbrella(self, dep: DependencyRef, axis: PlatformAxis) -> bool:
        """True when dep declares support for an axis without pinning a level."""
        if dep.coordinate in self._markers[axis]:
            return not dep.is_pinned
        if axis is PlatformAxis.ENTERPRISE and dep.group_id in self._umbrella_groups:
            return (dep.type or "").lower() == Constants.UMBRELLA_TYPE
        return False

    def _detect_axis(self, deps: List[DependencyRef], axis: PlatformAxis) -> Optional[Version]:
        pinned: List[Version] = []
        umbrella = False
        for dep in deps:
            if self.is_umbrella(dep, axis):
                umbrella = True
                continue
            if dep.coordinate not in self._markers[axis] or not dep.is_pinned:
                continue
            try:
                pinned.append(Version(dep.version.strip()))
            except InvalidVersion:
                logger.warning(
                    "Ignoring %s: version %s of %s is not a valid platform version.",
                    axis.name.lower(), dep.version, dep.coordinate,
                )

        if is_debug_enabled(logger):
            logger.debug(
                "Level markers scanned",
                extra=extra_context(
                    event="decision",
                    component="level_detector",
                    action="detect",
                    target=axis.value,
                    count=len(pinned),
                    umbrella=umbrella,
                ),
            )

        if not pinned:
            return None
        if len(set(pinned)) > 1:
            logger.warning(
                "Multiple %s platform versions declared (%s); using %s.",
                axis.name.lower(), ", ".join(str(v) for v in sorted(set(pinned))), max(pinned),
            )
        return max(pinned)
