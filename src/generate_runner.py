"""Feature generation runner.

Drives one generation cycle:
- Checks that compiled classes exist (otherwise nothing runs)
- Loads the scanner result, target levels and configured features
- Reconciles them and surfaces any conflict verbatim
- Writes the generated-features file only for a resolved, non-empty result
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional

from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants
from features.catalog import FeatureCatalog
from features.engine import ReconciliationEngine
from features.levels import LevelDetector
from features.messages import format_outcome
from features.models import Level, OutcomeKind, ScanOutcome, ServerConfigError
from features.output import OutputComputer
from liberty.server_xml import (
    read_configured_features,
    read_generated_features,
    remove_generated_features,
    write_generated_features,
)
from maven.pom import read_dependencies
from scanner.result import load_scan_result

logger = logging.getLogger(__name__)


@dataclass
class GenerationReport:
    """What one generation cycle decided and did."""
    outcome: Optional[ScanOutcome] = None
    level: Optional[Level] = None
    configured: FrozenSet[str] = field(default_factory=frozenset)
    message: Optional[str] = None
    generated: Optional[FrozenSet[str]] = None
    previous: FrozenSet[str] = field(default_factory=frozenset)
    output_path: Optional[str] = None
    written: bool = False
    removed: bool = False
    skipped: bool = False

    @property
    def has_conflict(self) -> bool:
        return self.outcome is not None and self.outcome.kind is not OutcomeKind.RESOLVED

    def to_dict(self) -> Dict[str, Any]:
        """Serializable view of the report for JSON output."""
        outcome = self.outcome
        data: Dict[str, Any] = {
            "outcome": outcome.kind.value if outcome is not None else None,
            "skipped": self.skipped,
            "level": {
                "enterprise": self.level.ee_label if self.level else None,
                "microprofile": self.level.mp_label if self.level else None,
            },
            "configured": sorted(self.configured),
            "generated": sorted(self.generated) if self.generated else [],
            "previous": sorted(self.previous),
            "output_path": self.output_path,
            "written": self.written,
            "removed": self.removed,
            "message": self.message,
        }
        if outcome is not None and outcome.kind is not OutcomeKind.RESOLVED:
            data["conflicts"] = sorted(outcome.conflicts)
            if outcome.kind is OutcomeKind.LEVEL_UNAVAILABLE:
                data["remove"] = sorted(outcome.remove)
            else:
                data["recommended"] = sorted(outcome.recommended)
        return data


def default_output_path(server_xml: Optional[str]) -> str:
    """Return configDropins/overrides/generated-features.xml beside server.xml."""
    config_dir = os.path.dirname(os.path.abspath(server_xml)) if server_xml else os.getcwd()
    return os.path.join(config_dir, "configDropins", "overrides", Constants.GENERATED_FEATURES_FILE)


def has_class_files(classes_dir: Optional[str]) -> bool:
    """True when classes_dir exists and contains at least one file."""
    if not classes_dir or not os.path.isdir(classes_dir):
        return False
    for _, _, files in os.walk(classes_dir):
        if files:
            return True
    return False


class GenerateFeaturesRunner:
    """Wires the external collaborators to the reconciliation core."""

    def __init__(
        self,
        catalog: FeatureCatalog,
        detector: Optional[LevelDetector] = None,
        output_computer: Optional[OutputComputer] = None,
    ):
        self._engine = ReconciliationEngine(catalog)
        self._detector = detector or LevelDetector()
        self._output = output_computer or OutputComputer()

    def run(  # pylint: disable=too-many-arguments
        self,
        scan_result: str,
        pom: Optional[str] = None,
        server_xml: Optional[str] = None,
        classes_dir: Optional[str] = None,
        output_path: Optional[str] = None,
        dry_run: bool = False,
    ) -> GenerationReport:
        """Run one generation cycle.

        Args:
            scan_result: Path to the scanner's recommended-feature file.
            pom: Path to pom.xml used for level detection.
            server_xml: Path to server.xml holding configured features.
            classes_dir: Compiled classes directory; when given and empty,
                generation is skipped.
            output_path: Generated-features file; defaults beside server.xml.
            dry_run: Decide but do not write or remove anything.

        Raises:
            FeatureGateError: On unreadable or malformed inputs.
            FileNotFoundError: If pom does not exist.
        """
        output_path = output_path or default_output_path(server_xml)
        report = GenerationReport(output_path=output_path)

        if classes_dir is not None and not has_class_files(classes_dir):
            logger.warning(Constants.NO_CLASSES_DIR_WARNING)
            report.skipped = True
            return report

        with Timer() as timer:
            scan = load_scan_result(scan_result)
            dependencies = read_dependencies(pom) if pom else []
            report.level = self._detector.detect(dependencies)
            report.configured = read_configured_features(
                server_xml, os.path.basename(output_path)
            )
            report.outcome = self._engine.reconcile(
                report.configured, scan.features, report.level
            )

        if is_debug_enabled(logger):
            logger.debug(
                "Generation decided",
                extra=extra_context(
                    event="decision",
                    component="runner",
                    action="generate",
                    outcome=report.outcome.kind.value,
                    duration_ms=timer.duration_ms(),
                ),
            )

        report.message = format_outcome(report.outcome)
        if report.message:
            logger.error(report.message)
            return report

        report.generated = self._output.compute(report.outcome)
        try:
            report.previous = read_generated_features(output_path)
        except ServerConfigError as e:
            logger.warning("Replacing unreadable generated features file: %s", e)
        if report.previous and report.previous != (report.generated or frozenset()):
            logger.info(
                "%s Previously generated features: %s.", Constants.ANALYSIS, sorted(report.previous)
            )
        if dry_run:
            logger.info(
                "%s Dry run; features that would be generated: %s.",
                Constants.ANALYSIS, sorted(report.generated or []),
            )
            return report

        if report.generated is None:
            report.removed = remove_generated_features(output_path)
            logger.info("%s No additional features are required.", Constants.ANALYSIS)
        else:
            write_generated_features(output_path, report.generated)
            report.written = True
            logger.info("%s Generated features: %s.", Constants.ANALYSIS, sorted(report.generated))
        return report
