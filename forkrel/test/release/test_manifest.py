from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

from forkrel.core.result import Err, Ok
from forkrel.output.console import MockConsole
from forkrel.release.manifest import (
    bump_manifest_text,
    plan_manifest_write,
    regenerate_lockfile,
)

CARGO = """[package]
name = "widget"
version = "0.2.0"
edition = "2021"

[dependencies]
serde = { version = "1.0" }

[dependencies.tokio]
version = "1.38.0"
"""


def test_bump_rewrites_only_first_version() -> None:
    result = bump_manifest_text(CARGO, "0.3.0", name="Cargo.toml")

    assert isinstance(result, Ok)
    assert 'version = "0.3.0"' in result.value
    assert 'version = "1.38.0"' in result.value
    assert result.value.count("0.3.0") == 1
    assert result.value == CARGO.replace('version = "0.2.0"', 'version = "0.3.0"')


def test_bump_ignores_indented_and_inline_versions() -> None:
    text = '[dependencies]\nserde = { version = "1.0" }\n  version = "9.9.9"\n'

    result = bump_manifest_text(text, "0.3.0", name="Cargo.toml")

    assert isinstance(result, Err)
    assert result.error.kind == "manifest_invalid"


def test_plan_manifest_write_missing_file(tmp_path: Path) -> None:
    result = plan_manifest_write(tmp_path / "Cargo.toml", "0.3.0")

    assert isinstance(result, Err)
    assert result.error.kind == "manifest_invalid"
    assert result.error.message == "cannot find Cargo.toml"


def test_plan_manifest_write_does_not_touch_file(tmp_path: Path) -> None:
    path = tmp_path / "Cargo.toml"
    path.write_text(CARGO, encoding="utf-8")

    result = plan_manifest_write(path, "0.3.0")

    assert isinstance(result, Ok)
    assert result.value.path == path
    assert 'version = "0.3.0"' in result.value.content
    assert path.read_text(encoding="utf-8") == CARGO


def _completed(returncode: int) -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(args=["cargo"], returncode=returncode, stdout="", stderr="")


@patch("subprocess.run")
def test_lockfile_first_command_succeeds(mock_run: MagicMock, tmp_path: Path) -> None:
    mock_run.return_value = _completed(0)
    console = MockConsole()

    warning = regenerate_lockfile(
        repo_root=tmp_path,
        commands=[("cargo", "generate-lockfile", "--quiet"), ("cargo", "check", "--quiet")],
        console=console,
    )

    assert warning is None
    assert mock_run.call_count == 1
    assert mock_run.call_args.args[0] == ["cargo", "generate-lockfile", "--quiet"]


@patch("subprocess.run")
def test_lockfile_falls_back_to_next_command(mock_run: MagicMock, tmp_path: Path) -> None:
    mock_run.side_effect = [_completed(1), _completed(0)]

    warning = regenerate_lockfile(
        repo_root=tmp_path,
        commands=[("cargo", "generate-lockfile"), ("cargo", "check")],
        console=MockConsole(),
    )

    assert warning is None
    assert mock_run.call_count == 2


@patch("subprocess.run")
def test_lockfile_failure_is_a_warning(mock_run: MagicMock, tmp_path: Path) -> None:
    mock_run.side_effect = FileNotFoundError("cargo")
    console = MockConsole()

    warning = regenerate_lockfile(
        repo_root=tmp_path,
        commands=[("cargo", "generate-lockfile")],
        console=console,
    )

    assert warning is not None
    assert warning.kind == "lockfile"
    assert console.has_warning()


@patch("subprocess.run")
def test_no_lockfile_commands(mock_run: MagicMock, tmp_path: Path) -> None:
    assert regenerate_lockfile(repo_root=tmp_path, commands=(), console=MockConsole()) is None
    mock_run.assert_not_called()
