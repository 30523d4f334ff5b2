"""Configuration overrides applied onto Constants before a run.

YAML configuration is applied first and CLI flags last, so the CLI has the
highest precedence. Unreadable configuration is logged and ignored.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from constants import Constants, _load_yaml_config

logger = logging.getLogger(__name__)


def _string_list(value: Any, key: str) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        logger.warning("Ignoring config key %s: expected a list of strings", key)
        return None
    return [v.strip() for v in value if v.strip()]


def apply_config(config: Dict[str, Any]) -> None:
    """Apply a parsed configuration mapping onto Constants."""
    catalog = config.get("catalog")
    if isinstance(catalog, str) and catalog.strip():
        Constants.CATALOG_PATH = catalog.strip()  # type: ignore[assignment]

    generated = config.get("generated_features_file")
    if isinstance(generated, str) and generated.strip():
        Constants.GENERATED_FEATURES_FILE = generated.strip()

    markers = config.get("markers") or {}
    if not isinstance(markers, dict):
        logger.warning("Ignoring config key markers: expected a mapping")
        return
    enterprise = _string_list(markers.get("enterprise"), "markers.enterprise")
    if enterprise is not None:
        Constants.ENTERPRISE_MARKERS = enterprise
    microprofile = _string_list(markers.get("microprofile"), "markers.microprofile")
    if microprofile is not None:
        Constants.MICROPROFILE_MARKERS = microprofile
    umbrella = _string_list(markers.get("umbrella_groups"), "markers.umbrella_groups")
    if umbrella is not None:
        Constants.UMBRELLA_GROUPS = umbrella


def apply_overrides(args) -> None:
    """Load YAML configuration, then apply CLI overrides."""
    config = _load_yaml_config(getattr(args, "CONFIG", None))
    if config:
        apply_config(config)
    if getattr(args, "CATALOG", None):
        Constants.CATALOG_PATH = args.CATALOG  # type: ignore[assignment]
