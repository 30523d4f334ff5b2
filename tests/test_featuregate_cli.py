"""End-to-end tests for the featuregate command line."""
from __future__ import annotations

import json
import logging

import pytest

from constants import Constants, ExitCodes
from featuregate import main


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user configuration and earlier overrides out of each run."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv(Constants.ENV_LOG_LEVEL, "INFO")
    monkeypatch.setattr(Constants, "CATALOG_PATH", None)
    monkeypatch.setattr(Constants, "GENERATED_FEATURES_FILE", "generated-features.xml")
    root = logging.getLogger()
    saved_level = root.level
    yield
    for handler in [h for h in root.handlers if getattr(h, "_featuregate", False)]:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(saved_level)


def _project(tmp_path, configured=(), recommended=()):
    scan = tmp_path / "scan.json"
    scan.write_text(json.dumps({"features": list(recommended)}), encoding="utf-8")
    server = tmp_path / "config" / "server.xml"
    server.parent.mkdir()
    entries = "".join(f"<feature>{f}</feature>" for f in configured)
    server.write_text(f"<server><featureManager>{entries}</featureManager></server>", encoding="utf-8")
    return str(scan), str(server)


def _run(argv):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code


def test_generates_features(tmp_path, capsys):
    scan, server = _project(tmp_path, recommended=["servlet-4.0"])
    assert _run(["-s", scan, "-x", server]) == ExitCodes.SUCCESS.value
    assert "Generated features: servlet-4.0" in capsys.readouterr().out
    assert (tmp_path / "config" / "configDropins" / "overrides" / "generated-features.xml").exists()


def test_conflict_exit_code_and_json_report(tmp_path, capsys):
    scan, server = _project(
        tmp_path,
        configured=["cdi-1.2"],
        recommended=["restfulWS-3.0", "servlet-5.0"],
    )
    assert _run(["-s", scan, "-x", server, "-f", "json"]) == ExitCodes.FEATURE_CONFLICT.value
    report = json.loads(capsys.readouterr().out)
    assert report["outcome"] == "api_conflict"
    assert report["conflicts"] == ["cdi-1.2", "restfulWS-3.0", "servlet-5.0"]
    assert report["written"] is False


def test_missing_scan_result_is_a_file_error(tmp_path):
    _, server = _project(tmp_path)
    assert _run(["-s", str(tmp_path / "absent.json"), "-x", server]) == ExitCodes.FILE_ERROR.value


def test_missing_pom_is_a_file_error(tmp_path):
    scan, server = _project(tmp_path, recommended=["servlet-4.0"])
    assert _run(["-s", scan, "-x", server, "-p", str(tmp_path / "pom.xml")]) == ExitCodes.FILE_ERROR.value


def test_catalog_from_config_file(tmp_path, capsys):
    catalog = tmp_path / "catalog.yml"
    catalog.write_text(
        "features:\n"
        "  custom-1.0:\n"
        "    platforms: [ee8]\n"
        "  custom-2.0:\n"
        "    platforms: [ee9]\n",
        encoding="utf-8",
    )
    (tmp_path / "featuregate.yml").write_text(f"catalog: {catalog}\n", encoding="utf-8")
    scan, server = _project(tmp_path, configured=["custom-1.0"], recommended=["custom-2.0"])

    assert _run(["-s", scan, "-x", server]) == ExitCodes.FEATURE_CONFLICT.value
    assert "[custom-1.0, custom-2.0]" in capsys.readouterr().out


def test_dry_run_leaves_no_file(tmp_path, capsys):
    scan, server = _project(tmp_path, recommended=["servlet-4.0"])
    assert _run(["-s", scan, "-x", server, "--dry-run"]) == ExitCodes.SUCCESS.value
    assert not (tmp_path / "config" / "configDropins").exists()
    capsys.readouterr()
