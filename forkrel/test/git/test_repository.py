"""Tests for git/repository.py."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

from forkrel.core.result import Err, Ok
from forkrel.git.repository import LogEntry, Repository


def make_completed_process(
    stdout: str = "",
    stderr: str = "",
    returncode: int = 0,
) -> subprocess.CompletedProcess[str]:
    """Create a mock CompletedProcess."""
    return subprocess.CompletedProcess(
        args=["git"],
        returncode=returncode,
        stdout=stdout,
        stderr=stderr,
    )


def _git_args(mock_run: MagicMock) -> list[str]:
    """Arguments after ``git -C <path>`` of the last call."""
    cmd = mock_run.call_args.args[0]
    assert cmd[:2] == ["git", "-C"]
    return cmd[3:]


# =============================================================================
# LogEntry Tests
# =============================================================================


class TestLogEntry:
    def test_merge_detection(self) -> None:
        assert LogEntry("a", "a", ("p1", "p2"), "Merge").is_merge is True
        assert LogEntry("a", "a", ("p1",), "Fix").is_merge is False

    def test_message_joins_body(self) -> None:
        assert LogEntry("a", "a", (), "Subject").message == "Subject"
        entry = LogEntry("a", "a", (), "Subject", body="Body text")
        assert entry.message == "Subject\n\nBody text"


# =============================================================================
# Repository Tests - Mocked subprocess
# =============================================================================


class TestRepository:
    """Tests for Repository class."""

    def test_name_is_directory_name(self, tmp_path: Path) -> None:
        assert Repository(tmp_path / "widget").name == "widget"

    @patch("subprocess.run")
    def test_discover(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout=f"{tmp_path}\n")

        result = Repository.discover(tmp_path / "sub")

        assert isinstance(result, Ok)
        assert result.value.path == tmp_path

    @patch("subprocess.run")
    def test_discover_outside_repo(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            stderr="fatal: not a git repository\n", returncode=128
        )

        result = Repository.discover(tmp_path)

        assert isinstance(result, Err)
        assert "not a git repository" in result.error.message

    @patch("subprocess.run")
    def test_is_clean_ignores_untracked(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="")

        assert Repository(tmp_path).is_clean() == Ok(True)
        assert _git_args(mock_run) == ["status", "--porcelain", "--untracked-files=no"]

    @patch("subprocess.run")
    def test_is_clean_dirty(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout=" M src/lib.rs\n")

        assert Repository(tmp_path).is_clean() == Ok(False)

    @patch("subprocess.run")
    def test_is_clean_error(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stderr="fatal: bad\n", returncode=128)

        result = Repository(tmp_path).is_clean()

        assert isinstance(result, Err)
        assert result.error.message == "fatal: bad"
        assert result.error.returncode == 128

    @patch("subprocess.run")
    def test_is_modified(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout=" M Cargo.lock\n")

        assert Repository(tmp_path).is_modified("Cargo.lock") == Ok(True)
        assert _git_args(mock_run) == ["status", "--porcelain", "--", "Cargo.lock"]

    @patch("subprocess.run")
    def test_is_modified_unchanged(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="")

        assert Repository(tmp_path).is_modified("Cargo.lock") == Ok(False)

    @patch("subprocess.run")
    def test_is_modified_error(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stderr="fatal: bad\n", returncode=128)

        result = Repository(tmp_path).is_modified("Cargo.lock")

        assert isinstance(result, Err)
        assert result.error.message == "fatal: bad"

    @patch("subprocess.run")
    def test_current_branch(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="main\n")
        assert Repository(tmp_path).current_branch() == "main"

    @patch("subprocess.run")
    def test_current_branch_detached(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="HEAD\n")
        assert Repository(tmp_path).current_branch() is None

    @patch("subprocess.run")
    def test_tag_exists(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process()
        assert Repository(tmp_path).tag_exists("fork-v0.1.0") is True
        assert _git_args(mock_run)[-1] == "refs/tags/fork-v0.1.0"

        mock_run.return_value = make_completed_process(returncode=1)
        assert Repository(tmp_path).tag_exists("fork-v0.1.0") is False

    @patch("subprocess.run")
    def test_list_tags(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="fork-v0.1.0\nfork-v0.2.0\n\n")

        result = Repository(tmp_path).list_tags("fork-v*")

        assert result == Ok(["fork-v0.1.0", "fork-v0.2.0"])
        assert _git_args(mock_run) == ["tag", "--list", "fork-v*"]

    @patch("subprocess.run")
    def test_remote_tags(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            stdout="aaa\trefs/tags/fork-v0.1.0\nbbb\trefs/tags/fork-v0.2.0\ngarbage\n"
        )

        result = Repository(tmp_path).remote_tags("origin", "fork-v*")

        assert result == Ok(["fork-v0.1.0", "fork-v0.2.0"])
        assert _git_args(mock_run) == [
            "ls-remote",
            "--tags",
            "--refs",
            "origin",
            "refs/tags/fork-v*",
        ]

    @patch("subprocess.run")
    def test_network_commands_get_longer_timeout(
        self, mock_run: MagicMock, tmp_path: Path
    ) -> None:
        mock_run.return_value = make_completed_process()
        repo = Repository(tmp_path)

        repo.fetch("upstream")
        fetch_timeout = mock_run.call_args.kwargs["timeout"]
        repo.list_tags("x*")
        local_timeout = mock_run.call_args.kwargs["timeout"]

        assert fetch_timeout > local_timeout

    @patch("subprocess.run")
    def test_short_sha_and_merge_base(self, mock_run: MagicMock, tmp_path: Path) -> None:
        repo = Repository(tmp_path)

        mock_run.return_value = make_completed_process(stdout="0f1e2d3\n")
        assert repo.short_sha("upstream/main") == "0f1e2d3"
        assert _git_args(mock_run)[-1] == "upstream/main^{commit}"

        mock_run.return_value = make_completed_process(returncode=1)
        assert repo.short_sha("upstream/main") is None
        assert repo.merge_base("upstream/main", "HEAD") is None

    @patch("subprocess.run")
    def test_log_non_merges_parses_paths(self, mock_run: MagicMock, tmp_path: Path) -> None:
        stdout = (
            "\x1eaaaa1111\x1faaaa111\x1fp0\x1fAdd retry\x1f\x1f\n\nsrc/a.rs\nsrc/b.rs\n"
            "\x1ebbbb2222\x1fbbbb222\x1fp1\x1fDocs\x1fLonger\nbody\x1f\n\ndocs/x.md\n"
        )
        mock_run.return_value = make_completed_process(stdout=stdout)

        result = Repository(tmp_path).log("fork-v0.1.0..HEAD", merges=False)

        assert isinstance(result, Ok)
        first, second = result.value
        assert first.sha == "aaaa1111"
        assert first.short_hash == "aaaa111"
        assert first.parents == ("p0",)
        assert first.subject == "Add retry"
        assert first.paths == ("src/a.rs", "src/b.rs")
        assert second.body == "Longer\nbody"
        assert second.paths == ("docs/x.md",)

        args = _git_args(mock_run)
        assert args[:3] == ["-c", "core.quotePath=false", "log"]
        assert "--no-merges" in args
        assert "--name-only" in args
        assert args[-1] == "fork-v0.1.0..HEAD"

    @patch("subprocess.run")
    def test_log_merges(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            stdout="\x1ecccc\x1fccc\x1fp1 p2\x1fMerge upstream/main\x1f\x1f\n"
        )

        result = Repository(tmp_path).log("abc..HEAD", merges=True)

        assert isinstance(result, Ok)
        (merge,) = result.value
        assert merge.is_merge
        assert merge.paths == ()
        assert "--merges" in _git_args(mock_run)

    @patch("subprocess.run")
    def test_commit_returns_head(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.side_effect = [
            make_completed_process(),
            make_completed_process(stdout="deadbeefcafe\n"),
        ]

        assert Repository(tmp_path).commit("release: fork-v0.1.0") == Ok("deadbeefcafe")

    @patch("subprocess.run")
    def test_commit_failure(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            stderr="Please tell me who you are.\n", returncode=128
        )

        result = Repository(tmp_path).commit("msg")

        assert isinstance(result, Err)
        assert result.error.command == "commit"
        assert mock_run.call_count == 1

    @patch("subprocess.run")
    def test_create_annotated_tag(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process()

        assert Repository(tmp_path).create_annotated_tag("fork-v1.0.0", "msg") == Ok(None)
        assert _git_args(mock_run) == ["tag", "-a", "fork-v1.0.0", "-m", "msg"]

    @patch("subprocess.run")
    def test_push_failure(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stderr="rejected\n", returncode=1)

        result = Repository(tmp_path).push("origin", "main")

        assert isinstance(result, Err)
        assert result.error.message == "rejected"
