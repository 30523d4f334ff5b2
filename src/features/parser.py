"""Feature name parsing and input normalization."""

import re
from typing import FrozenSet, Iterable, Optional, Tuple

_VERSIONED = re.compile(r"^(?P<short>.+)-(?P<version>\d+(?:\.\d+)*)$")


def split_feature(name: str) -> Tuple[str, Optional[str]]:
    """Return (short_name, version or None) using the rightmost-hyphen rule.

    Only a dotted numeric suffix counts as a version, so names such as
    "usr:my-feature" keep their hyphen.
    """
    name = name.strip()
    match = _VERSIONED.match(name)
    if not match:
        return name, None
    return match.group("short"), match.group("version")


def short_name(name: str) -> str:
    """Return the capability identity of a version-qualified feature."""
    return split_feature(name)[0]


def feature_key(name: str) -> str:
    """Return the case-insensitive identity used to compare feature names."""
    return name.strip().lower()


def normalize_features(features: Optional[Iterable[str]]) -> FrozenSet[str]:
    """Strip whitespace, drop empty entries and collapse duplicates."""
    if not features:
        return frozenset()
    normalized = set()
    for raw in features:
        if raw is None:
            continue
        name = str(raw).strip()
        if name:
            normalized.add(name)
    return frozenset(normalized)
