"""Tests for the feature generation runner."""
from __future__ import annotations

import json
import logging
import os

import pytest

from constants import Constants
from features.catalog import load_catalog
from features.models import OutcomeKind, ScanResultError
from generate_runner import GenerateFeaturesRunner, default_output_path, has_class_files
from liberty.server_xml import read_generated_features, write_generated_features

POM = """<project xmlns="http://maven.apache.org/POM/4.0.0">
  <dependencies>
    <dependency>
      <groupId>javax</groupId>
      <artifactId>javaee-api</artifactId>
      <version>{ee}</version>
    </dependency>
    <dependency>
      <groupId>org.eclipse.microprofile</groupId>
      <artifactId>microprofile</artifactId>
      <version>{mp}</version>
      <type>pom</type>
    </dependency>
  </dependencies>
</project>
"""


class Project:
    """Minimal application layout for one generation cycle."""

    def __init__(self, root, features=(), recommended=(), ee="8.0", mp="[1.0,)"):
        self.root = root
        self.pom = root / "pom.xml"
        self.pom.write_text(POM.format(ee=ee, mp=mp), encoding="utf-8")
        config = root / "src" / "main" / "liberty" / "config"
        config.mkdir(parents=True)
        self.server_xml = config / "server.xml"
        entries = "".join(f"<feature>{f}</feature>" for f in features)
        self.server_xml.write_text(
            f"<server><featureManager>{entries}</featureManager></server>", encoding="utf-8"
        )
        self.classes = root / "target" / "classes"
        (self.classes / "com" / "example").mkdir(parents=True)
        (self.classes / "com" / "example" / "App.class").write_bytes(b"\xca\xfe\xba\xbe")
        self.scan = root / "target" / "scan.json"
        self.scan.write_text(json.dumps({"features": list(recommended)}), encoding="utf-8")
        self.output = config / "configDropins" / "overrides" / "generated-features.xml"

    def run(self, **kwargs):
        runner = GenerateFeaturesRunner(load_catalog())
        params = dict(
            scan_result=str(self.scan),
            pom=str(self.pom),
            server_xml=str(self.server_xml),
            classes_dir=str(self.classes),
        )
        params.update(kwargs)
        return runner.run(**params)


def test_generates_recommended_features(tmp_path):
    project = Project(tmp_path, recommended=["servlet-4.0", "jaxrs-2.1"])
    report = project.run()

    assert report.outcome.kind is OutcomeKind.RESOLVED
    assert report.level.ee_label == "ee8"
    assert report.level.mp_label is None
    assert report.written
    assert report.output_path == str(project.output)
    assert read_generated_features(str(project.output)) == frozenset({"servlet-4.0", "jaxrs-2.1"})


def test_configured_feature_is_not_generated(tmp_path):
    project = Project(
        tmp_path,
        features=["restfulWS-3.0"],
        recommended=["restfulWS-3.0", "servlet-5.0", "mpHealth-4.0"],
        ee="[8.0,)",
    )
    report = project.run()
    assert report.generated == frozenset({"servlet-5.0", "mpHealth-4.0"})
    assert "restfulWS-3.0" not in read_generated_features(str(project.output))


def test_missing_classes_skips_generation(tmp_path, caplog):
    project = Project(tmp_path, recommended=["servlet-4.0"])
    with caplog.at_level(logging.WARNING):
        report = project.run(classes_dir=str(tmp_path / "nope"))
    assert report.skipped
    assert report.outcome is None
    assert not project.output.exists()
    assert Constants.NO_CLASSES_DIR_WARNING in caplog.text


def test_conflict_writes_nothing(tmp_path, caplog):
    project = Project(
        tmp_path,
        features=["cdi-1.2"],
        recommended=["restfulWS-3.0", "servlet-5.0", "mpHealth-4.0"],
        ee="[8.0,)",
    )
    with caplog.at_level(logging.ERROR):
        report = project.run()
    assert report.has_conflict
    assert report.outcome.kind is OutcomeKind.API_CONFLICT
    assert report.message in caplog.text
    assert report.generated is None
    assert not project.output.exists()


def test_level_conflict_reports_pinned_levels(tmp_path):
    project = Project(
        tmp_path,
        features=["mpOpenAPI-1.0"],
        recommended=["servlet-4.0", "jaxrs-2.1"],
        mp="1.2",
    )
    report = project.run()
    assert report.outcome.kind is OutcomeKind.LEVEL_UNAVAILABLE
    data = report.to_dict()
    assert data["remove"] == ["mpOpenAPI"]
    assert data["conflicts"] == ["jaxrs-2.1", "mpOpenAPI-1.0", "servlet-4.0"]
    assert data["level"] == {"enterprise": "ee8", "microprofile": "mp1.2"}
    assert "mp1.2" in report.message and "ee8" in report.message


def test_stale_generated_file_is_removed(tmp_path):
    project = Project(tmp_path, features=["servlet-4.0"], recommended=["servlet-4.0"])
    write_generated_features(str(project.output), ["jaxrs-2.1"])
    report = project.run()
    assert report.generated is None
    assert report.removed
    assert report.previous == frozenset({"jaxrs-2.1"})
    assert not project.output.exists()


def test_previous_output_is_not_configuration(tmp_path):
    project = Project(tmp_path, recommended=["servlet-4.0"])
    write_generated_features(str(project.output), ["servlet-4.0"])
    report = project.run()
    assert report.configured == frozenset()
    assert report.previous == frozenset({"servlet-4.0"})
    assert report.generated == frozenset({"servlet-4.0"})
    assert project.output.exists()


def test_dry_run_writes_nothing(tmp_path):
    project = Project(tmp_path, recommended=["servlet-4.0"])
    report = project.run(dry_run=True)
    assert report.generated == frozenset({"servlet-4.0"})
    assert not report.written
    assert not project.output.exists()


def test_missing_scan_result_is_not_nothing_needed(tmp_path):
    project = Project(tmp_path, recommended=["servlet-4.0"])
    project.scan.unlink()
    with pytest.raises(ScanResultError):
        project.run()


def test_helpers(tmp_path):
    assert default_output_path(str(tmp_path / "server.xml")).endswith(
        os.path.join("configDropins", "overrides", "generated-features.xml")
    )
    assert not has_class_files(None)
    (tmp_path / "empty").mkdir()
    assert not has_class_files(str(tmp_path / "empty"))


def test_unreadable_previous_output_is_replaced(tmp_path, caplog):
    project = Project(tmp_path, recommended=["servlet-4.0"])
    project.output.parent.mkdir(parents=True)
    project.output.write_text("<server><featureManager>", encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        report = project.run()
    assert report.previous == frozenset()
    assert report.written
    assert read_generated_features(str(project.output)) == frozenset({"servlet-4.0"})
    assert "unreadable generated features file" in caplog.text
