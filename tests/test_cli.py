"""Tests for scarb-eject CLI entrypoints."""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path

import pytest

import scarb_eject.main as main
from scarb_eject import __version__
from scarb_eject.cli import eject as eject_module


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main, "setup_logging", lambda *a, **k: None)


def _write_metadata(tmp_path: Path, metadata: dict) -> Path:
    path = tmp_path / "metadata.json"
    path.write_text(json.dumps(metadata), encoding="utf-8")
    return path


def test_main_parses_arguments(monkeypatch: pytest.MonkeyPatch) -> None:
    """Verify that `main` parses args and dispatches eject_command."""
    captured: dict[str, object] = {}

    def fake_eject_command(args) -> int:
        captured["args"] = args
        return 0

    monkeypatch.setattr(main, "eject_command", fake_eject_command)

    exit_code = main.main(
        ["-o", "-", "-p", "app", "--no-deps", "--manifest-path", "Scarb.toml"]
    )

    assert exit_code == 0
    parsed = captured["args"]
    assert parsed.output == "-"
    assert parsed.package == "app"
    assert parsed.no_deps is True
    assert parsed.absolute_paths is False
    assert parsed.manifest_path == "Scarb.toml"
    assert parsed.metadata is None


def test_main_version(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main.main(["--version"])

    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_main_writes_descriptor_file(
    tmp_path: Path, scarb_metadata: dict, workspace_dir: Path
) -> None:
    metadata_path = _write_metadata(tmp_path, scarb_metadata)
    output = workspace_dir / "cairo_project.toml"

    exit_code = main.main(["--metadata", str(metadata_path), "-o", str(output)])

    assert exit_code == 0
    data = tomllib.loads(output.read_text(encoding="utf-8"))
    assert data["crate_roots"] == {"app": "app/src", "lib": "lib/src"}


def test_main_writes_to_stdout(
    tmp_path: Path, scarb_metadata: dict, capsys: pytest.CaptureFixture[str]
) -> None:
    metadata_path = _write_metadata(tmp_path, scarb_metadata)

    exit_code = main.main(["--metadata", str(metadata_path), "-o", "-", "--no-deps"])

    assert exit_code == 0
    data = tomllib.loads(capsys.readouterr().out)
    assert set(data["crate_roots"]) == {"app", "lib"}
    assert "dependencies" not in data["config"]["global"]


def test_main_runs_scarb_without_metadata_file(
    monkeypatch: pytest.MonkeyPatch, scarb_metadata: dict, workspace_dir: Path
) -> None:
    captured: dict[str, object] = {}

    def fake_run_scarb_metadata(scarb_path, manifest_path):
        captured["scarb_path"] = scarb_path
        captured["manifest_path"] = manifest_path
        return scarb_metadata

    monkeypatch.setattr(eject_module, "run_scarb_metadata", fake_run_scarb_metadata)

    exit_code = main.main(
        [
            "--manifest-path",
            str(workspace_dir / "Scarb.toml"),
            "-c",
            'scarb_path = "/opt/scarb/bin/scarb"',
        ]
    )

    assert exit_code == 0
    assert captured["scarb_path"] == "/opt/scarb/bin/scarb"
    assert captured["manifest_path"] == workspace_dir / "Scarb.toml"
    assert (workspace_dir / "cairo_project.toml").exists()


def test_main_reports_unknown_package(
    tmp_path: Path,
    scarb_metadata: dict,
    workspace_dir: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    metadata_path = _write_metadata(tmp_path, scarb_metadata)

    with caplog.at_level(logging.ERROR):
        exit_code = main.main(["--metadata", str(metadata_path), "-p", "ghost"])

    assert exit_code == 1
    assert "UnknownPackage" in caplog.text
    assert "ghost" in caplog.text
    assert not (workspace_dir / "cairo_project.toml").exists()


def test_main_reports_invalid_config(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR):
        exit_code = main.main(["-c", '{"absolute_paths": "maybe"}'])

    assert exit_code == 1
    assert "Invalid configuration" in caplog.text


def test_main_reports_metadata_failure(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.ERROR):
        exit_code = main.main(["--metadata", str(tmp_path / "missing.json")])

    assert exit_code == 1
    assert "MetadataError" in caplog.text


def test_main_reports_malformed_metadata(
    tmp_path: Path,
    scarb_metadata: dict,
    workspace_dir: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    for component in scarb_metadata["compilation_units"][1]["components"]:
        component["name"] = None
    metadata_path = _write_metadata(tmp_path, scarb_metadata)

    with caplog.at_level(logging.ERROR):
        exit_code = main.main(["--metadata", str(metadata_path)])

    assert exit_code == 1
    assert "MetadataError" in caplog.text
    assert not (workspace_dir / "cairo_project.toml").exists()
