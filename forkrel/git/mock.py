"""In-memory repository for testing the release flow without git."""

from __future__ import annotations

from fnmatch import fnmatchcase
from pathlib import Path

from forkrel.core.result import Err, Ok, Result
from forkrel.git.repository import GitError, LogEntry

__all__ = ["MockRepository"]


class MockRepository:
    """VCS backend holding tags, refs and history in dicts.

    Usage:
        repo = MockRepository(tmp_path)
        repo.merge_bases[("upstream/main", "HEAD")] = "abc123"
        repo.history["abc123..HEAD"] = [
            LogEntry("s1", "s1", ("abc123",), "Fix", paths=("src/a.rs",)),
        ]
        repo.fail("fetch", "could not resolve host")

    Every call is recorded in ``calls`` as ``(method, *args)``.
    """

    def __init__(self, path: Path, *, branch: str | None = "main") -> None:
        self.path = path
        self.clean = True
        self.branch = branch
        self.tags: dict[str, str] = {}
        self.remote_tag_names: dict[str, list[str]] = {}
        self.short_shas: dict[str, str] = {}
        self.merge_bases: dict[tuple[str, str], str] = {}
        self.history: dict[str, list[LogEntry]] = {}
        self.modified: set[str] = set()
        self.staged: list[str] = []
        self.commits: list[tuple[tuple[str, ...], str]] = []
        self.pushed: list[tuple[str, str]] = []
        self.calls: list[tuple[str, ...]] = []
        self._failures: dict[str, str] = {}

    def fail(self, method: str, message: str) -> None:
        """Make every later call to method return an error."""
        self._failures[method] = message

    def _failure(self, method: str, *args: str) -> GitError | None:
        self.calls.append((method, *args))
        message = self._failures.get(method)
        if message is None:
            return None
        return GitError(command=method, message=message)

    @property
    def name(self) -> str:
        return self.path.name

    def is_clean(self) -> Result[bool, GitError]:
        error = self._failure("is_clean")
        if error is not None:
            return Err(error)
        return Ok(self.clean)

    def is_modified(self, path: str) -> Result[bool, GitError]:
        error = self._failure("is_modified", path)
        if error is not None:
            return Err(error)
        return Ok(path in self.modified)

    def current_branch(self) -> str | None:
        self.calls.append(("current_branch",))
        return self.branch

    def tag_exists(self, tag: str) -> bool:
        self.calls.append(("tag_exists", tag))
        return tag in self.tags

    def list_tags(self, pattern: str) -> Result[list[str], GitError]:
        error = self._failure("list_tags", pattern)
        if error is not None:
            return Err(error)
        return Ok(sorted(t for t in self.tags if fnmatchcase(t, pattern)))

    def remote_tags(self, remote: str, pattern: str) -> Result[list[str], GitError]:
        error = self._failure("remote_tags", remote, pattern)
        if error is not None:
            return Err(error)
        names = self.remote_tag_names.get(remote, [])
        return Ok([t for t in names if fnmatchcase(t, pattern)])

    def short_sha(self, ref: str) -> str | None:
        self.calls.append(("short_sha", ref))
        return self.short_shas.get(ref)

    def merge_base(self, a: str, b: str) -> str | None:
        self.calls.append(("merge_base", a, b))
        return self.merge_bases.get((a, b))

    def log(self, rev_range: str, *, merges: bool) -> Result[list[LogEntry], GitError]:
        error = self._failure("log", rev_range)
        if error is not None:
            return Err(error)
        entries = self.history.get(rev_range, [])
        if merges:
            return Ok([e for e in entries if e.is_merge])
        return Ok([e for e in entries if not e.is_merge])

    def fetch(self, remote: str) -> Result[str, GitError]:
        error = self._failure("fetch", remote)
        if error is not None:
            return Err(error)
        return Ok("")

    def add(self, paths: list[str]) -> Result[None, GitError]:
        error = self._failure("add", *paths)
        if error is not None:
            return Err(error)
        self.staged.extend(paths)
        return Ok(None)

    def commit(self, message: str) -> Result[str, GitError]:
        error = self._failure("commit")
        if error is not None:
            return Err(error)
        self.commits.append((tuple(self.staged), message))
        self.staged = []
        return Ok(f"{len(self.commits):040x}")

    def create_annotated_tag(self, tag: str, message: str) -> Result[None, GitError]:
        error = self._failure("create_annotated_tag", tag)
        if error is not None:
            return Err(error)
        if tag in self.tags:
            return Err(GitError(command="tag", message=f"fatal: tag '{tag}' already exists"))
        self.tags[tag] = message
        return Ok(None)

    def push(self, remote: str, ref: str) -> Result[str, GitError]:
        error = self._failure("push", remote, ref)
        if error is not None:
            return Err(error)
        self.pushed.append((remote, ref))
        return Ok("")
