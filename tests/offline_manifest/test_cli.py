import json
from pathlib import Path

import yaml

from offline_manifest.cli import main


def _prepare(tmp_path: Path, options: dict) -> tuple[Path, Path]:
    dist = tmp_path / "dist"
    (dist / "css").mkdir(parents=True)
    (dist / "index.html").write_text("<html></html>", encoding="utf-8")
    (dist / "app.js").write_text("console.log('app')", encoding="utf-8")
    (dist / "app.js.map").write_text("{}", encoding="utf-8")
    (dist / "css" / "site.css").write_text("body{}", encoding="utf-8")
    config = tmp_path / "offline.yaml"
    config.write_text(yaml.safe_dump(options, sort_keys=False), encoding="utf-8")
    return dist, config


def test_cli_writes_manifests(tmp_path, capsys) -> None:
    dist, config = _prepare(tmp_path, {"version": "build-{hash}", "app_cache": False})
    code = main(["--config", str(config), "--output-dir", str(dist), "--log-level", "WARNING"])
    assert code == 0
    assert (dist / "sw.js").exists()
    summary = json.loads(capsys.readouterr().out)
    assert summary["version"] == f"build-{summary['hash']}"
    assert summary["sections"] == {"main": 3, "additional": 0, "optional": 0}
    assert summary["emitted"] == ["sw.js"]
    assert summary["errors"] == []


def test_cli_dry_run_writes_nothing(tmp_path, capsys) -> None:
    dist, config = _prepare(tmp_path, {})
    code = main(["--config", str(config), "--output-dir", str(dist), "--dry-run"])
    assert code == 0
    assert not (dist / "sw.js").exists()
    assert not (dist / "appcache").exists()
    summary = json.loads(capsys.readouterr().out)
    assert set(summary["emitted"]) == {"sw.js", "appcache/manifest.appcache", "appcache/manifest.html"}


def test_cli_reports_configuration_errors(tmp_path, capsys) -> None:
    dist, config = _prepare(tmp_path, {"update_strategy": "sometimes"})
    code = main(["--config", str(config), "--output-dir", str(dist)])
    assert code == 1
    summary = json.loads(capsys.readouterr().out)
    assert summary["reason_code"] == "UPDATE_STRATEGY_UNKNOWN"
    assert len(summary["errors"]) == 1


def test_cli_rerun_ignores_previous_outputs(tmp_path, capsys) -> None:
    dist, config = _prepare(tmp_path, {"version": "{hash}"})
    argv = ["--config", str(config), "--output-dir", str(dist), "--log-level", "WARNING"]

    assert main(argv) == 0
    first = json.loads(capsys.readouterr().out)
    assert (dist / "appcache" / "manifest.appcache").exists()

    assert main(argv) == 0
    second = json.loads(capsys.readouterr().out)

    assert second["hash"] == first["hash"]
    assert second["version"] == first["version"]
    assert second["sections"] == first["sections"] == {"main": 3, "additional": 0, "optional": 0}
    worker = (dist / "sw.js").read_text(encoding="utf-8")
    assert '"sw.js"' not in worker
    assert "manifest.appcache" not in worker
