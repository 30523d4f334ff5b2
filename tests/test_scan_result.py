"""Tests for loading the scanner's recommended features."""

import json

import pytest

from features.models import ScanResultError
from scanner.result import load_scan_result


def test_load_json_result(tmp_path):
    path = tmp_path / "scan.json"
    path.write_text(json.dumps({"features": ["servlet-4.0", "jaxrs-2.1", "servlet-4.0"]}), encoding="utf-8")
    result = load_scan_result(str(path))
    assert result.features == frozenset({"servlet-4.0", "jaxrs-2.1"})
    assert result.source == str(path)


def test_load_yaml_list(tmp_path):
    path = tmp_path / "scan.yml"
    path.write_text("- restfulWS-3.0\n- mpHealth-4.0\n", encoding="utf-8")
    assert load_scan_result(str(path)).features == frozenset({"restfulWS-3.0", "mpHealth-4.0"})


def test_empty_feature_list_is_a_valid_result(tmp_path):
    path = tmp_path / "scan.json"
    path.write_text('{"features": []}', encoding="utf-8")
    assert load_scan_result(str(path)).features == frozenset()


def test_missing_result_is_an_error(tmp_path):
    with pytest.raises(ScanResultError, match="not found"):
        load_scan_result(str(tmp_path / "scan.json"))


@pytest.mark.parametrize(
    "content",
    ['{"other": []}', '{"features": "servlet-4.0"}', '{"features": [1, 2]}', "{not json"],
)
def test_malformed_results(tmp_path, content):
    path = tmp_path / "scan.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ScanResultError):
        load_scan_result(str(path))
