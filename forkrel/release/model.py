from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path

from forkrel.release.errors import ReleaseWarning


@dataclass(frozen=True, slots=True)
class ReleaseRequest:
    version: str
    push: bool = False
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class ForkTag:
    version: str
    prefix: str = "fork-v"

    @property
    def name(self) -> str:
        return f"{self.prefix}{self.version}"

    def __str__(self) -> str:
        return self.name


class BaseOrigin(Enum):
    PRIOR_FORK_TAG = "prior fork tag"
    UPSTREAM_MERGE_BASE = "upstream merge-base"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ChangelogBase:
    """Exclusive lower bound of the release range ``(ref, HEAD]``."""

    ref: str
    origin: BaseOrigin
    tag: str | None = None

    @property
    def short_ref(self) -> str:
        # Tags read better in full; commit ids are cut to 12 chars.
        if self.tag is not None:
            return self.tag
        return self.ref[:12]


@dataclass(frozen=True, slots=True)
class CommitRecord:
    short_hash: str
    subject: str

    @property
    def line(self) -> str:
        return f"{self.short_hash} {self.subject}"


@dataclass(frozen=True, slots=True)
class CategorizedCommits:
    """Commits of one release range, each bucket newest-first."""

    code_changes: tuple[CommitRecord, ...] = ()
    docs_ci_changes: tuple[CommitRecord, ...] = ()
    upstream_sync_merges: tuple[CommitRecord, ...] = ()


@dataclass(frozen=True, slots=True)
class UpstreamBaseline:
    remote: str
    branch: str
    short_hash: str | None

    @property
    def label(self) -> str:
        return f"{self.remote}/{self.branch}"

    @property
    def display_hash(self) -> str:
        return self.short_hash or "unknown"


@dataclass(frozen=True, slots=True)
class ChangelogSection:
    heading: str
    lines: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ChangelogEntry:
    version: str
    date: date
    sections: tuple[ChangelogSection, ...]


@dataclass(frozen=True, slots=True)
class RepositoryState:
    """Snapshot of the repository taken once per run."""

    local_tags: frozenset[str]
    remote_tags: frozenset[str]
    fork_tags: tuple[str, ...]
    upstream_merge_base: str | None
    upstream_head: str | None
    current_branch: str | None


@dataclass(frozen=True, slots=True)
class PendingWrite:
    """A file's full new content, held in memory until the release is applied."""

    path: Path
    content: str
    created: bool = False


@dataclass(frozen=True, slots=True)
class ReleasePlan:
    request: ReleaseRequest
    tag: ForkTag
    base: ChangelogBase
    commits: CategorizedCommits
    baseline: UpstreamBaseline
    entry: ChangelogEntry
    entry_text: str
    manifest: PendingWrite
    changelog: PendingWrite
    current_branch: str | None
    warnings: tuple[ReleaseWarning, ...] = ()


@dataclass(frozen=True, slots=True)
class ReleaseOutcome:
    tag: str
    commit_sha: str
    lockfile_updated: bool
    pushed: bool
    warnings: tuple[ReleaseWarning, ...] = field(default_factory=tuple)
