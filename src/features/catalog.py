"""Feature catalog: which feature variants exist at which platform levels.

The catalog is built once from a mapping (usually a YAML document) and is
read-only afterwards. The reconciliation engine receives it at construction
time, so tests can supply synthetic catalogs.

YAML layout::

    features:
      servlet-4.0:
        platforms: [ee8]
      cdi-1.2:
        platforms: [ee7]
        conflicts: [restfulWS-3.0]
"""
from __future__ import annotations

import logging
import os
import re
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Set

import yaml

from constants import PlatformAxis
from .models import CatalogError, Level
from .parser import feature_key
from .parser import short_name as _short_name

logger = logging.getLogger(__name__)

BUILTIN_CATALOG = os.path.join(os.path.dirname(__file__), "catalog.yml")

_PLATFORM_LABEL = re.compile(r"^(ee\d+|mp\d+\.\d+)$")


class FeatureCatalog:
    """Immutable lookup of feature availability and declared incompatibilities.

    Lookups ignore case. Feature identity elsewhere stays literal.
    """

    def __init__(
        self,
        platforms: Mapping[str, Iterable[str]],
        conflicts: Iterable[Iterable[str]] = (),
    ):
        """Build a catalog.

        Args:
            platforms: Version-qualified feature name -> platform labels
                (e.g. "ee8", "mp1.2") at which that variant is available.
            conflicts: Pairs of feature names declared incompatible.

        Raises:
            CatalogError: If a platform label or conflict pair is malformed.
        """
        by_feature: Dict[str, FrozenSet[str]] = {}
        by_short: Dict[str, Set[str]] = {}
        for name, labels in platforms.items():
            key = str(name).strip().lower()
            if not key:
                raise CatalogError("empty feature name in catalog")
            label_set = frozenset(str(label).strip().lower() for label in (labels or []))
            bad = sorted(label for label in label_set if not _PLATFORM_LABEL.match(label))
            if bad:
                raise CatalogError(f"invalid platform label(s) for {name}: {', '.join(bad)}")
            by_feature[key] = label_set
            by_short.setdefault(_short_name(key), set()).add(key)

        pairs: Set[FrozenSet[str]] = set()
        for pair in conflicts:
            members = [str(member).strip().lower() for member in pair]
            if len(members) != 2 or members[0] == members[1]:
                raise CatalogError(f"conflict entries must name two different features: {pair!r}")
            pairs.add(frozenset(members))

        self._platforms = MappingProxyType(by_feature)
        self._variants = MappingProxyType({k: frozenset(v) for k, v in by_short.items()})
        self._conflicts: FrozenSet[FrozenSet[str]] = frozenset(pairs)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FeatureCatalog":
        """Build a catalog from the parsed YAML layout described in the module docstring."""
        if not isinstance(data, Mapping):
            raise CatalogError("catalog document must be a mapping")
        features = data.get("features") or {}
        if not isinstance(features, Mapping):
            raise CatalogError("'features' must be a mapping of feature name to entry")

        platforms: Dict[str, Iterable[str]] = {}
        conflicts = []
        for name, entry in features.items():
            entry = entry or {}
            if not isinstance(entry, Mapping):
                raise CatalogError(f"catalog entry for {name} must be a mapping")
            labels = entry.get("platforms") or []
            if isinstance(labels, str):
                labels = [labels]
            platforms[str(name)] = labels
            for other in entry.get("conflicts") or []:
                conflicts.append((str(name), str(other)))
        return cls(platforms, conflicts)

    def __len__(self) -> int:
        return len(self._platforms)

    def __contains__(self, feature: object) -> bool:
        return isinstance(feature, str) and feature.strip().lower() in self._platforms

    def short_name(self, feature: str) -> str:
        """Return the short name of a version-qualified feature."""
        return _short_name(feature)

    def variants(self, short_name: str) -> FrozenSet[str]:
        """Return known version-qualified variants (lower-cased) of a capability."""
        return self._variants.get(short_name.strip().lower(), frozenset())

    def platforms(self, feature: str) -> FrozenSet[str]:
        """Return platform labels at which a variant is available."""
        return self._platforms.get(feature.strip().lower(), frozenset())

    def exists_at(self, short_name: str, level: Level) -> bool:
        """Whether some variant of short_name is legal at every pinned axis of level.

        Axes left undetermined impose no constraint. A capability with no
        known variant on a pinned axis is not constrained by that axis.
        """
        variants = self.variants(short_name)
        if not variants:
            return True
        for axis, label in (
            (PlatformAxis.ENTERPRISE, level.ee_label),
            (PlatformAxis.MICROPROFILE, level.mp_label),
        ):
            if label is None:
                continue
            on_axis = [
                {p for p in self._platforms[v] if p.startswith(axis.value)}
                for v in variants
            ]
            on_axis = [labels for labels in on_axis if labels]
            if on_axis and not any(label in labels for labels in on_axis):
                return False
        return True

    def conflicts_with(self, feature_a: str, feature_b: str) -> bool:
        """True when two features cannot coexist in one runtime configuration."""
        a = feature_key(feature_a)
        b = feature_key(feature_b)
        if a == b:
            return False
        if _short_name(a) == _short_name(b):
            return True
        return frozenset((a, b)) in self._conflicts


def load_catalog(path: Optional[str] = None) -> FeatureCatalog:
    """Load a catalog from a YAML file, defaulting to the built-in catalog.

    Raises:
        CatalogError: If the file is missing, unreadable or malformed.
    """
    path = path or BUILTIN_CATALOG
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except FileNotFoundError as exc:
        raise CatalogError(f"feature catalog not found: {path}") from exc
    except (OSError, yaml.YAMLError) as exc:
        raise CatalogError(f"could not read feature catalog {path}: {exc}") from exc
    catalog = FeatureCatalog.from_dict(data)
    logger.debug("Loaded feature catalog %s with %d features", path, len(catalog))
    return catalog
