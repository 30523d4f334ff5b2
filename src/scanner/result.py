"""Loader for the external API scanner's recommended feature set.

Accepts a JSON or YAML document of the form ``{"features": [...]}``; a bare
list of feature names is accepted too.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, FrozenSet

import yaml

from constants import Constants
from features.models import ScanResultError
from features.parser import normalize_features

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanResult:
    """Features recommended by the scanner for one build."""
    features: FrozenSet[str]
    source: str


def _parse(path: str, text: str) -> Any:
    lower = path.lower()
    try:
        if lower.endswith(".json"):
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ScanResultError(f"Couldn't parse scanner result {path}: {exc}") from exc


def load_scan_result(path: str) -> ScanResult:
    """Load the scanner result file.

    Raises:
        ScanResultError: If the file is missing or not a feature list. A
            missing result means the scan did not run, never "nothing needed".
    """
    if not path or not os.path.isfile(path):
        raise ScanResultError(f"Scanner result not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = _parse(path, fh.read())
    except OSError as exc:
        raise ScanResultError(f"Couldn't read scanner result {path}: {exc}") from exc

    if isinstance(data, dict):
        if "features" not in data:
            raise ScanResultError(f"Scanner result {path} has no 'features' entry")
        data = data.get("features")
    if data is None:
        data = []
    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise ScanResultError(f"Scanner result {path} must list feature names")

    result = ScanResult(features=normalize_features(data), source=path)
    logger.info("%s Recommended features: %s.", Constants.ANALYSIS, sorted(result.features))
    return result
