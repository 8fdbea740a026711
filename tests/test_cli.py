"""Tests for the command-line interface."""

import json
from pathlib import Path

import pytest

from cargo_duplicates import cli


LOCKFILE = """\
version = 3

[[package]]
name = "a"
version = "0.1.0"
dependencies = [
 "b 1.0.0",
 "c",
]

[[package]]
name = "b"
version = "1.0.0"

[[package]]
name = "b"
version = "2.0.0"

[[package]]
name = "c"
version = "0.1.0"
dependencies = [
 "b 2.0.0",
]
"""


@pytest.fixture
def lockfile(tmp_path: Path) -> Path:
    path = tmp_path / "Cargo.lock"
    path.write_text(LOCKFILE, encoding="utf-8")
    return path


def test_cli_offline_text_output(lockfile: Path, capsys):
    code = cli.main(["--lockfile", str(lockfile), "--offline", "--color", "never"])

    out = capsys.readouterr().out
    assert code == 0
    assert "b (1.0.0) 1 packages" in out
    assert "  - a v0.1.0" in out


def test_cli_offline_json_output(lockfile: Path, capsys):
    code = cli.main(["--lockfile", str(lockfile), "--offline", "--format", "json"])

    data = json.loads(capsys.readouterr().out)
    assert code == 0
    assert [(d["package"], d["version"], d["latest"]) for d in data["duplicates"]] == [
        ("b", "1.0.0", "2.0.0"),
    ]
    assert data["duplicates"][0]["users"][0]["chain"] == ["a v0.1.0"]


def test_cli_writes_reports(lockfile: Path, tmp_path: Path, capsys):
    output_dir = tmp_path / "reports"

    code = cli.main(["--lockfile", str(lockfile), "--offline", "--output-dir", str(output_dir)])

    assert code == 0
    assert (output_dir / "cargo_duplicates.json").exists()
    assert (output_dir / "cargo_duplicates.csv").exists()
    assert "Results saved to" in capsys.readouterr().err


def test_cli_missing_lockfile(tmp_path: Path, capsys):
    code = cli.main(["--lockfile", str(tmp_path / "nope.lock"), "--offline"])

    assert code == 1
    assert "Lock file not found" in capsys.readouterr().err


def test_cli_unparseable_lockfile(tmp_path: Path, capsys):
    path = tmp_path / "Cargo.lock"
    path.write_text("[[package]\n", encoding="utf-8")

    code = cli.main(["--lockfile", str(path), "--offline"])

    assert code == 1
    assert "failed to parse" in capsys.readouterr().err


def test_cli_exit_zero_without_duplicates(tmp_path: Path, capsys):
    path = tmp_path / "Cargo.lock"
    path.write_text('[[package]]\nname = "solo"\nversion = "1.0.0"\n', encoding="utf-8")

    assert cli.main(["--lockfile", str(path), "--offline"]) == 0
    assert "No duplicate packages found" in capsys.readouterr().out


def test_cli_registry_failure_falls_back(lockfile: Path, capsys, monkeypatch):
    from cargo_duplicates.exceptions import ResolverError
    from cargo_duplicates.resolvers import CratesIoResolver

    def fail(self, name):
        raise ResolverError(name, "connection refused")

    monkeypatch.setattr(CratesIoResolver, "fetch_crate_metadata", fail)

    code = cli.main(["--lockfile", str(lockfile), "--format", "json", "--no-progress"])

    data = json.loads(capsys.readouterr().out)
    assert code == 0
    assert data["fallbacks"] == ["b"]
    assert data["duplicates"][0]["latest_source"] == "local"


@pytest.mark.parametrize(
    "choice, expected",
    [("always", True), ("never", False)],
)
def test_use_color_explicit(choice, expected):
    assert cli.use_color(choice) is expected


def test_use_color_auto_respects_tty(monkeypatch):
    class Tty:
        def isatty(self):
            return True

    monkeypatch.delenv("NO_COLOR", raising=False)
    assert cli.use_color("auto", Tty()) is True
    monkeypatch.setenv("NO_COLOR", "1")
    assert cli.use_color("auto", Tty()) is False
