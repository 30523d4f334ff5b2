"""Server configuration reader and generated-feature file writer.

Reads the <featureManager> features a user declared in server.xml, its
<include> files and configDropins, and persists generated features to a
separate overrides file.
"""
from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from glob import glob
from typing import FrozenSet, Iterable, List, Optional, Set

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from features.models import ServerConfigError
from features.parser import normalize_features

logger = logging.getLogger(__name__)

_SERVER_CONFIG_DIR = "${server.config.dir}"


def _parse_root(path: str) -> ET.Element:
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as exc:
        raise ServerConfigError(f"Couldn't parse server configuration {path}: {exc}") from exc
    except OSError as exc:
        raise ServerConfigError(f"Couldn't read server configuration {path}: {exc}") from exc
    for elem in root.iter():
        if isinstance(elem.tag, str) and "}" in elem.tag:
            elem.tag = elem.tag.split("}", 1)[1]
    return root


def parse_features(root: ET.Element) -> List[str]:
    """Return <featureManager><feature> values in document order."""
    features = []
    for manager in root.iter("featureManager"):
        for feature in manager.findall("feature"):
            if feature.text and feature.text.strip():
                features.append(feature.text.strip())
    return features


def _include_paths(root: ET.Element, base_dir: str, config_dir: str) -> List[str]:
    paths = []
    for include in root.iter("include"):
        location = (include.get("location") or "").strip()
        if not location:
            continue
        location = location.replace(_SERVER_CONFIG_DIR, config_dir)
        if "${" in location:
            logger.warning("Skipping include with unresolved variable: %s", location)
            continue
        if location.startswith(("http://", "https://")):
            logger.warning("Skipping remote include: %s", location)
            continue
        path = location if os.path.isabs(location) else os.path.join(base_dir, location)
        if not os.path.isfile(path):
            if (include.get("optional") or "").lower() != "true":
                logger.warning("Included server configuration not found: %s", path)
            continue
        paths.append(os.path.normpath(path))
    return paths


def _dropin_paths(config_dir: str) -> List[str]:
    paths = []
    for dropin in Constants.CONFIG_DROPINS_DIRS:
        paths.extend(sorted(glob(os.path.join(config_dir, dropin, "*.xml"))))
    return paths


def read_configured_features(
    server_xml: Optional[str],
    generated_file_name: Optional[str] = None,
) -> FrozenSet[str]:
    """Collect the features declared for a server.

    Reads server.xml, follows <include> files once each and reads
    configDropins/defaults and configDropins/overrides. The generated-features
    file is skipped so previous output never counts as user configuration.

    Args:
        server_xml: Path to server.xml, or None for an empty configuration.
        generated_file_name: File name of the generated-features file.

    Returns:
        Normalized set of version-qualified feature names.

    Raises:
        ServerConfigError: If server.xml is missing or any file is malformed.
    """
    if not server_xml:
        return frozenset()
    if not os.path.isfile(server_xml):
        raise ServerConfigError(f"{Constants.SERVER_XML_FILE} not found: {server_xml}")

    generated_name = generated_file_name or Constants.GENERATED_FEATURES_FILE
    config_dir = os.path.dirname(os.path.abspath(server_xml))
    pending = [os.path.normpath(os.path.abspath(server_xml))] + _dropin_paths(config_dir)
    visited: Set[str] = set()
    declared: List[str] = []

    while pending:
        path = os.path.normpath(os.path.abspath(pending.pop(0)))
        if path in visited:
            continue
        visited.add(path)
        if os.path.basename(path) == generated_name:
            logger.debug("Skipping generated features file %s", path)
            continue
        root = _parse_root(path)
        found = parse_features(root)
        declared.extend(found)
        pending.extend(_include_paths(root, os.path.dirname(path), config_dir))
        if is_debug_enabled(logger):
            logger.debug(
                "Read server configuration",
                extra=extra_context(
                    event="parse",
                    component="server_xml",
                    action="read_features",
                    target=path,
                    count=len(found),
                ),
            )

    features = normalize_features(declared)
    logger.info("%s Configured features: %s.", Constants.ANALYSIS, sorted(features))
    return features


def read_generated_features(path: str) -> FrozenSet[str]:
    """Return the features in a previously generated file, or an empty set."""
    if not os.path.isfile(path):
        return frozenset()
    return normalize_features(parse_features(_parse_root(path)))


def write_generated_features(path: str, features: Iterable[str]) -> None:
    """Write a <server> document declaring the given features, sorted."""
    server = ET.Element("server", {"description": Constants.GENERATED_FEATURES_DESCRIPTION})
    server.append(
        ET.Comment(" Features generated from the application's API usage. Do not edit. ")
    )
    manager = ET.SubElement(server, "featureManager")
    for name in sorted(normalize_features(features)):
        ET.SubElement(manager, "feature").text = name
    ET.indent(server, space="    ")

    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    tree = ET.ElementTree(server)
    with open(path, "wb") as fh:
        tree.write(fh, encoding="UTF-8", xml_declaration=True)
        fh.write(b"\n")
    logger.info("Generated features file has been written at: %s", path)


def remove_generated_features(path: str) -> bool:
    """Delete a stale generated-features file. Returns True when one was removed."""
    if not os.path.isfile(path):
        return False
    os.remove(path)
    logger.info("Removed generated features file %s; no additional features are required.", path)
    return True
