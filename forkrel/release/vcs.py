"""The VCS capability the release flow depends on.

``forkrel.git.Repository`` satisfies this protocol against a real clone;
``forkrel.git.MockRepository`` is the in-memory version used by tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from forkrel.core.result import Result
from forkrel.git.repository import GitError, LogEntry


class VcsBackend(Protocol):
    path: Path

    @property
    def name(self) -> str: ...

    def is_clean(self) -> Result[bool, GitError]: ...

    def is_modified(self, path: str) -> Result[bool, GitError]: ...

    def current_branch(self) -> str | None: ...

    def tag_exists(self, tag: str) -> bool: ...

    def list_tags(self, pattern: str) -> Result[list[str], GitError]: ...

    def remote_tags(self, remote: str, pattern: str) -> Result[list[str], GitError]: ...

    def short_sha(self, ref: str) -> str | None: ...

    def merge_base(self, a: str, b: str) -> str | None: ...

    def log(self, rev_range: str, *, merges: bool) -> Result[list[LogEntry], GitError]: ...

    def fetch(self, remote: str) -> Result[str, GitError]: ...

    def add(self, paths: list[str]) -> Result[None, GitError]: ...

    def commit(self, message: str) -> Result[str, GitError]: ...

    def create_annotated_tag(self, tag: str, message: str) -> Result[None, GitError]: ...

    def push(self, remote: str, ref: str) -> Result[str, GitError]: ...
