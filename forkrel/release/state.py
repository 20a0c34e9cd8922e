"""Read-only repository queries and release preconditions."""

from __future__ import annotations

from forkrel.core.config import ReleaseConfig, RemotesConfig
from forkrel.core.result import Err, Ok, Result
from forkrel.output.console import ConsoleProtocol, Style
from forkrel.release.errors import ReleaseError, ReleaseWarning
from forkrel.release.model import RepositoryState
from forkrel.release.vcs import VcsBackend


def assert_clean_tree(vcs: VcsBackend, *, dry_run: bool) -> Result[None, ReleaseError]:
    """Fail on uncommitted changes to tracked files; skipped in dry-run."""
    if dry_run:
        return Ok(None)

    clean = vcs.is_clean()
    if isinstance(clean, Err):
        return Err(
            ReleaseError(
                kind="vcs_failed",
                message="failed to check working tree status",
                hint=clean.error.message,
            )
        )
    if not clean.value:
        return Err(
            ReleaseError(
                kind="dirty_tree",
                message="working tree is not clean; commit or stash changes first",
                hint="Use --dry-run to preview the release without a clean tree.",
            )
        )
    return Ok(None)


def _duplicate_tag(tag: str, where: str) -> Err[ReleaseError]:
    return Err(
        ReleaseError(
            kind="duplicate_tag",
            message=f"tag already exists {where}: {tag}",
            hint="Pick a new version.",
        )
    )


def assert_local_tag_available(vcs: VcsBackend, tag: str) -> Result[None, ReleaseError]:
    """Fast local check, run before any network access."""
    if vcs.tag_exists(tag):
        return _duplicate_tag(tag, "locally")
    return Ok(None)


def assert_tag_available(
    state: RepositoryState,
    tag: str,
    *,
    remote: str,
) -> Result[None, ReleaseError]:
    """Fail if tag is already present locally or on the fork remote."""
    if tag in state.local_tags:
        return _duplicate_tag(tag, "locally")
    if tag in state.remote_tags:
        return _duplicate_tag(tag, f"on {remote}")
    return Ok(None)


def fetch_remotes(
    vcs: VcsBackend,
    remotes: RemotesConfig,
    console: ConsoleProtocol,
) -> list[ReleaseWarning]:
    """Best-effort fetch of the fork and upstream remotes.

    A failed fetch is reported and the run continues on whatever
    remote-tracking refs are already present.
    """
    warnings: list[ReleaseWarning] = []
    for remote in (remotes.origin, remotes.upstream):
        console.print(f"git fetch --tags {remote}", Style.DIM)
        fetched = vcs.fetch(remote)
        if isinstance(fetched, Err):
            warning = ReleaseWarning(kind="network", message=f"could not fetch {remote}")
            console.warning(warning.message)
            warnings.append(warning)
    return warnings


def snapshot_state(
    vcs: VcsBackend,
    config: ReleaseConfig,
    console: ConsoleProtocol,
) -> Result[tuple[RepositoryState, list[ReleaseWarning]], ReleaseError]:
    """Read everything the pure resolution steps need, once."""
    prefix = config.release.tag_prefix
    remotes = config.remotes
    warnings: list[ReleaseWarning] = []

    local = vcs.list_tags(f"{prefix}*")
    if isinstance(local, Err):
        return Err(
            ReleaseError(
                kind="vcs_failed",
                message="failed to list local tags",
                hint=local.error.message,
            )
        )

    remote_tags: list[str] = []
    listed = vcs.remote_tags(remotes.origin, f"{prefix}*")
    if isinstance(listed, Err):
        warning = ReleaseWarning(
            kind="network",
            message=f"could not list tags on {remotes.origin}; remote duplicate check skipped",
        )
        console.warning(warning.message)
        warnings.append(warning)
    else:
        remote_tags = listed.value

    state = RepositoryState(
        local_tags=frozenset(local.value),
        remote_tags=frozenset(remote_tags),
        fork_tags=tuple(local.value),
        upstream_merge_base=vcs.merge_base(remotes.upstream_ref, "HEAD"),
        upstream_head=vcs.short_sha(remotes.upstream_ref),
        current_branch=vcs.current_branch(),
    )
    return Ok((state, warnings))
