from __future__ import annotations

from collections.abc import Sequence

from forkrel.core.config import ChangelogConfig
from forkrel.core.result import Err, Ok, Result
from forkrel.git.repository import LogEntry
from forkrel.release.errors import ReleaseError
from forkrel.release.model import CategorizedCommits, ChangelogBase, CommitRecord
from forkrel.release.vcs import VcsBackend


def is_excluded(path: str, excluded_paths: Sequence[str]) -> bool:
    """True if path lies under one of the excluded prefixes.

    ``docs/`` covers ``docs`` and ``docs/a.md`` but not ``docsite/a.md``.
    """
    for prefix in excluded_paths:
        p = prefix.rstrip("/")
        if not p:
            continue
        if path == p or path.startswith(p + "/"):
            return True
    return False


def categorize_commits(
    non_merges: Sequence[LogEntry],
    merges: Sequence[LogEntry],
    *,
    excluded_paths: Sequence[str],
    sync_marker: str,
) -> CategorizedCommits:
    """Split a release range into fork changes, docs/CI changes and upstream syncs.

    Input order (newest first) is preserved in every bucket.
    """
    code: list[CommitRecord] = []
    docs_ci: list[CommitRecord] = []
    for entry in non_merges:
        if entry.is_merge or not entry.paths:
            continue
        record = CommitRecord(short_hash=entry.short_hash, subject=entry.subject)
        if all(is_excluded(p, excluded_paths) for p in entry.paths):
            docs_ci.append(record)
        else:
            code.append(record)

    marker = sync_marker.casefold()
    syncs = tuple(
        CommitRecord(short_hash=m.short_hash, subject=m.subject)
        for m in merges
        if m.is_merge and marker and marker in m.message.casefold()
    )

    return CategorizedCommits(
        code_changes=tuple(code),
        docs_ci_changes=tuple(docs_ci),
        upstream_sync_merges=syncs,
    )


def collect_commits(
    vcs: VcsBackend,
    base: ChangelogBase,
    policy: ChangelogConfig,
) -> Result[CategorizedCommits, ReleaseError]:
    """Query ``(base, HEAD]`` and categorize it."""
    rev_range = f"{base.ref}..HEAD"

    non_merges = vcs.log(rev_range, merges=False)
    if isinstance(non_merges, Err):
        return Err(
            ReleaseError(
                kind="vcs_failed",
                message=f"failed to read history {rev_range}",
                hint=non_merges.error.message,
            )
        )

    merges = vcs.log(rev_range, merges=True)
    if isinstance(merges, Err):
        return Err(
            ReleaseError(
                kind="vcs_failed",
                message=f"failed to read merges {rev_range}",
                hint=merges.error.message,
            )
        )

    return Ok(
        categorize_commits(
            non_merges.value,
            merges.value,
            excluded_paths=policy.excluded_paths,
            sync_marker=policy.sync_marker,
        )
    )
