"""Tests for command-line argument parsing."""

import pytest

from args import parse_args


def test_defaults():
    args = parse_args(["-s", "scan.json"])
    assert args.SCAN_RESULT == "scan.json"
    assert args.POM is None
    assert args.SERVER_XML is None
    assert args.DRY_RUN is False
    assert args.OUTPUT_FORMAT == "text"
    assert args.LOG_LEVEL == "INFO"


def test_all_options():
    args = parse_args([
        "--scan-result", "scan.yml",
        "--pom", "pom.xml",
        "--server-xml", "server.xml",
        "--classes-dir", "target/classes",
        "--catalog", "catalog.yml",
        "--output", "out.xml",
        "--dry-run",
        "--format", "JSON",
        "--loglevel", "DEBUG",
        "--config", "featuregate.yml",
    ])
    assert args.CLASSES_DIR == "target/classes"
    assert args.CATALOG == "catalog.yml"
    assert args.OUTPUT == "out.xml"
    assert args.DRY_RUN is True
    assert args.OUTPUT_FORMAT == "json"
    assert args.CONFIG == "featuregate.yml"


def test_scan_result_is_required():
    with pytest.raises(SystemExit):
        parse_args([])
