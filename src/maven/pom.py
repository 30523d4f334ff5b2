"""Maven pom.xml reader producing the dependency list used for level detection."""
from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from features.models import DependencyRef, PomParseError

logger = logging.getLogger(__name__)

_PROPERTY_REF = re.compile(r"\$\{([^}]+)\}")


def _strip_namespaces(root: ET.Element) -> None:
    # Remove namespace for easier parsing
    for elem in root.iter():
        if isinstance(elem.tag, str) and "}" in elem.tag:
            elem.tag = elem.tag.split("}", 1)[1]


def _text(node: Optional[ET.Element]) -> Optional[str]:
    if node is None or node.text is None:
        return None
    value = node.text.strip()
    return value or None


def _collect_properties(pom: ET.Element) -> Dict[str, str]:
    props: Dict[str, str] = {}
    project_version = _text(pom.find("version")) or _text(pom.find("parent/version"))
    if project_version:
        props["project.version"] = project_version
    properties = pom.find("properties")
    if properties is not None:
        for prop in properties:
            value = _text(prop)
            if value is not None:
                props[prop.tag] = value
    return props


def _interpolate(value: Optional[str], props: Dict[str, str]) -> Optional[str]:
    """Resolve ${name} references; unknown references are left untouched."""
    if value is None:
        return None
    for _ in range(10):  # bounded to break reference cycles
        replaced = _PROPERTY_REF.sub(lambda m: props.get(m.group(1), m.group(0)), value)
        if replaced == value:
            break
        value = replaced
    return value


def parse_dependencies(pom_xml: str) -> List[DependencyRef]:
    """Parse project dependencies from pom.xml content.

    Direct <dependencies> come first, then <dependencyManagement> entries,
    each in document order. Plugin dependencies are ignored and entries
    without a groupId or artifactId are skipped.

    Raises:
        PomParseError: If the XML is malformed.
    """
    try:
        pom = ET.fromstring(pom_xml)
    except ET.ParseError as exc:
        raise PomParseError(f"Couldn't parse pom.xml: {exc}") from exc
    _strip_namespaces(pom)
    props = _collect_properties(pom)

    deps: List[DependencyRef] = []
    nodes = pom.findall("dependencies/dependency") + pom.findall(
        "dependencyManagement/dependencies/dependency"
    )
    for dependency in nodes:
        group = _text(dependency.find("groupId"))
        artifact = _text(dependency.find("artifactId"))
        if group is None or artifact is None:
            continue
        deps.append(
            DependencyRef(
                group_id=_interpolate(group, props),
                artifact_id=_interpolate(artifact, props),
                version=_interpolate(_text(dependency.find("version")), props),
                type=_text(dependency.find("type")),
            )
        )
    return deps


def read_dependencies(pom_path: str) -> List[DependencyRef]:
    """Read the dependency list from a pom.xml file.

    Raises:
        FileNotFoundError: If the file does not exist.
        PomParseError: If the XML is malformed.
    """
    with open(pom_path, "r", encoding="utf-8") as fh:
        content = fh.read()
    deps = parse_dependencies(content)
    logger.info("%s %d dependencies read from %s.", Constants.ANALYSIS, len(deps), pom_path)
    if is_debug_enabled(logger):
        logger.debug(
            "Parsed pom dependencies",
            extra=extra_context(
                event="parse",
                component="pom",
                action="read_dependencies",
                target=pom_path,
                count=len(deps),
                coordinates=[d.coordinate for d in deps],
            ),
        )
    return deps
