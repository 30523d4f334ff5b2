"""Constants used in the project."""

import logging
import os
from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    FEATURE_CONFLICT = 4


class PlatformAxis(Enum):
    """Specification level axes a feature can be constrained by.

    Args:
        Enum (string): Axis name and platform label prefix.
    """

    ENTERPRISE = "ee"
    MICROPROFILE = "mp"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ANALYSIS = "[FEATURES]"
    ENV_LOG_LEVEL = "FEATUREGATE_LOG_LEVEL"

    SERVER_XML_FILE = "server.xml"
    GENERATED_FEATURES_FILE = "generated-features.xml"
    CONFIG_DROPINS_DIRS = ["configDropins/defaults", "configDropins/overrides"]
    GENERATED_FEATURES_DESCRIPTION = "This file was generated by featuregate"

    # Default catalog shipped beside the features package; None means built-in.
    CATALOG_PATH = None

    # Platform API artifacts that pin an axis when given a concrete version.
    ENTERPRISE_MARKERS = [
        "javax:javaee-api",
        "javax:javaee-web-api",
        "jakarta.platform:jakarta.jakartaee-api",
        "jakarta.platform:jakarta.jakartaee-web-api",
        "jakarta.platform:jakarta.jakartaee-core-api",
    ]
    MICROPROFILE_MARKERS = [
        "org.eclipse.microprofile:microprofile",
    ]
    # Feature repositories declaring features for a range of enterprise levels.
    UMBRELLA_GROUPS = ["io.openliberty.features"]
    UMBRELLA_TYPE = "esa"

    UNDETERMINED_LEVEL = "unspecified"

    NO_CLASSES_DIR_WARNING = (
        "Could not find class files to scan. "
        "Compile the application before generating features."
    )

    CONFIG_FILE_NAMES = ["featuregate.yml", "featuregate.yaml"]


def _candidate_config_paths():
    """Return default configuration locations in priority order."""
    paths = [os.path.join(os.getcwd(), name) for name in Constants.CONFIG_FILE_NAMES]
    xdg = os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    paths.extend(os.path.join(xdg, "featuregate", name) for name in Constants.CONFIG_FILE_NAMES)
    return paths


def _load_yaml_config(path=None):
    """Load the first available YAML configuration.

    Args:
        path (str, optional): Explicit configuration path. Defaults to the
            standard locations.

    Returns:
        dict: Parsed configuration, or an empty dict when none is found.
    """
    import yaml  # pylint: disable=import-outside-toplevel

    candidates = [path] if path else _candidate_config_paths()
    for candidate in candidates:
        if not candidate or not os.path.isfile(candidate):
            continue
        try:
            with open(candidate, "r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except (OSError, yaml.YAMLError) as exc:
            logging.getLogger(__name__).warning("Ignoring unreadable config %s: %s", candidate, exc)
            continue
        if isinstance(data, dict):
            return data
        logging.getLogger(__name__).warning("Ignoring config %s: top level must be a mapping", candidate)
    return {}
