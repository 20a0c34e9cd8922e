"""Git repository abstraction.

This module provides the Repository class, the git-backed implementation of
the release flow's VCS capability. Operations that can fail return Result
types; lookups whose failure simply means "not there" return None.

Usage:
    match Repository.discover(Path.cwd()):
        case Ok(repo):
            print(repo.list_tags("fork-v*"))
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from forkrel.core.result import Err, Ok, Result
from forkrel.platform.process import ProcessError
from forkrel.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0
_NETWORK_COMMANDS = frozenset({"fetch", "ls-remote", "pull", "push"})

# Record/field separators for the structured log format.
_RS = "\x1e"
_FS = "\x1f"
_LOG_FORMAT = f"--format={_RS}%H{_FS}%h{_FS}%P{_FS}%s{_FS}%b{_FS}"

__all__ = [
    "GitError",
    "LogEntry",
    "Repository",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class LogEntry:
    """One commit as returned by a structured ``git log`` query.

    Attributes:
        sha: Full commit hash
        short_hash: Abbreviated hash as git prints it
        parents: Parent hashes (more than one for a merge)
        subject: First line of the message
        body: Message body after the subject (may be empty)
        paths: Paths changed by the commit (empty for merges)
    """

    sha: str
    short_hash: str
    parents: tuple[str, ...]
    subject: str
    body: str = ""
    paths: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    @property
    def message(self) -> str:
        """Full commit message (subject and body)."""
        if self.body:
            return f"{self.subject}\n\n{self.body}"
        return self.subject


class Repository:
    """Git repository abstraction.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    @classmethod
    def discover(cls, cwd: Path) -> Result[Repository, GitError]:
        """Find the repository containing cwd (``git rev-parse --show-toplevel``)."""
        result = run_process(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=cwd,
            timeout=_GIT_TIMEOUT_SECONDS,
        )
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command="rev-parse --show-toplevel",
                        message=e.stderr.strip() or "not in a git repository",
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                return Ok(cls(Path(stdout.strip())))

    @property
    def name(self) -> str:
        return self.path.name

    # -- Read-only queries -------------------------------------------------

    def is_clean(self) -> Result[bool, GitError]:
        """True if there are no staged or unstaged changes to tracked files.

        Untracked files do not make the tree dirty.
        """
        result = self._run(["status", "--porcelain", "--untracked-files=no"])
        match result:
            case Err(e):
                return Err(self._error("status", e, "git status failed"))
            case Ok(stdout):
                return Ok(stdout.strip() == "")

    def is_modified(self, path: str) -> Result[bool, GitError]:
        """True if path has any change, tracked or untracked."""
        result = self._run(["status", "--porcelain", "--", path])
        match result:
            case Err(e):
                return Err(self._error("status", e, "git status failed"))
            case Ok(stdout):
                return Ok(stdout.strip() != "")

    def current_branch(self) -> str | None:
        """Get current branch name, None if detached HEAD or error."""
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Ok(stdout):
                branch = stdout.strip()
                return None if branch == "HEAD" else branch
            case Err(_):
                return None

    def tag_exists(self, tag: str) -> bool:
        """True if refs/tags/<tag> exists locally."""
        result = self._run(["show-ref", "--tags", "--verify", "--quiet", f"refs/tags/{tag}"])
        return isinstance(result, Ok)

    def list_tags(self, pattern: str) -> Result[list[str], GitError]:
        """List local tags matching a glob pattern."""
        result = self._run(["tag", "--list", pattern])
        match result:
            case Err(e):
                return Err(self._error("tag --list", e, "git tag failed"))
            case Ok(stdout):
                return Ok([ln.strip() for ln in stdout.splitlines() if ln.strip()])

    def remote_tags(self, remote: str, pattern: str) -> Result[list[str], GitError]:
        """List tags matching pattern on a remote (``git ls-remote``)."""
        result = self._run(["ls-remote", "--tags", "--refs", remote, f"refs/tags/{pattern}"])
        match result:
            case Err(e):
                return Err(self._error("ls-remote", e, f"could not list tags on {remote}"))
            case Ok(stdout):
                return Ok(self._parse_ls_remote(stdout))

    def short_sha(self, ref: str) -> str | None:
        """Abbreviated hash of the commit ref points to, None if unresolvable."""
        result = self._run(["rev-parse", "--short", "--verify", "--quiet", f"{ref}^{{commit}}"])
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def merge_base(self, a: str, b: str) -> str | None:
        """Best common ancestor of a and b.

        Returns None when there is no common ancestor or a ref is unknown.
        """
        result = self._run(["merge-base", a, b])
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def log(self, rev_range: str, *, merges: bool) -> Result[list[LogEntry], GitError]:
        """Commits in rev_range, newest first.

        Args:
            rev_range: A range such as ``fork-v0.2.0..HEAD``
            merges: True for merge commits only, False for non-merges only.
                Non-merge entries carry their changed paths.
        """
        args = ["-c", "core.quotePath=false", "log", _LOG_FORMAT]
        if merges:
            args.append("--merges")
        else:
            args.extend(["--no-merges", "--name-only", "--no-renames"])
        args.append(rev_range)

        result = self._run(args)
        match result:
            case Err(e):
                return Err(self._error("log", e, f"git log {rev_range} failed"))
            case Ok(stdout):
                return Ok(self._parse_log(stdout))

    # -- Mutations ---------------------------------------------------------

    def fetch(self, remote: str) -> Result[str, GitError]:
        """Fetch a remote including its tags."""
        result = self._run(["fetch", "--quiet", "--tags", remote])
        match result:
            case Err(e):
                return Err(self._error(f"fetch {remote}", e, "fetch failed"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def add(self, paths: list[str]) -> Result[None, GitError]:
        result = self._run(["add", "--", *paths])
        match result:
            case Err(e):
                return Err(self._error("add", e, "git add failed"))
            case Ok(_):
                return Ok(None)

    def commit(self, message: str) -> Result[str, GitError]:
        """Commit the index and return the new HEAD hash."""
        result = self._run(["commit", "--quiet", "-m", message])
        if isinstance(result, Err):
            return Err(self._error("commit", result.error, "git commit failed"))

        head = self._run(["rev-parse", "HEAD"])
        match head:
            case Err(e):
                return Err(self._error("rev-parse HEAD", e, "could not read new HEAD"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def create_annotated_tag(self, tag: str, message: str) -> Result[None, GitError]:
        result = self._run(["tag", "-a", tag, "-m", message])
        match result:
            case Err(e):
                return Err(self._error(f"tag -a {tag}", e, "git tag failed"))
            case Ok(_):
                return Ok(None)

    def push(self, remote: str, ref: str) -> Result[str, GitError]:
        result = self._run(["push", remote, ref])
        match result:
            case Err(e):
                return Err(self._error(f"push {remote} {ref}", e, "push failed"))
            case Ok(stdout):
                return Ok(stdout.strip())

    # -- Internals ---------------------------------------------------------

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = next((a for a in args if not a.startswith("-") and "=" not in a), "")
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS if command in _NETWORK_COMMANDS else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)

    def _error(self, command: str, e: ProcessError, fallback: str) -> GitError:
        return GitError(
            command=command,
            message=e.stderr.strip() or e.stdout.strip() or fallback,
            returncode=e.returncode,
        )

    def _parse_ls_remote(self, output: str) -> list[str]:
        """Parse ``<sha>\\trefs/tags/<name>`` lines into tag names."""
        tags: list[str] = []
        for line in output.splitlines():
            parts = line.strip().split("\t", 1)
            if len(parts) != 2:
                continue
            ref = parts[1].strip()
            if ref.startswith("refs/tags/"):
                tags.append(ref[len("refs/tags/") :])
        return tags

    def _parse_log(self, output: str) -> list[LogEntry]:
        """Parse output produced with ``_LOG_FORMAT`` (and optionally --name-only)."""
        entries: list[LogEntry] = []
        for chunk in output.split(_RS):
            if not chunk.strip():
                continue
            fields = chunk.split(_FS, 5)
            if len(fields) < 5:
                continue
            sha, short_hash, parents, subject, body = fields[:5]
            rest = fields[5] if len(fields) > 5 else ""
            entries.append(
                LogEntry(
                    sha=sha.strip(),
                    short_hash=short_hash.strip(),
                    parents=tuple(parents.split()),
                    subject=subject,
                    body=body.strip(),
                    paths=tuple(ln.strip() for ln in rest.splitlines() if ln.strip()),
                )
            )
        return entries
