from __future__ import annotations

from forkrel.core.result import Err, Ok, Result
from forkrel.release.errors import ReleaseError
from forkrel.release.model import BaseOrigin, ChangelogBase, RepositoryState
from forkrel.release.semver import latest_fork_tag


def resolve_changelog_base(
    state: RepositoryState,
    *,
    tag_prefix: str,
    upstream_ref: str,
) -> Result[ChangelogBase, ReleaseError]:
    """Pick the lower bound of "what's new in this release".

    Any existing fork tag wins: the greatest by version precedence is the
    base. Only a fork with no release yet falls back to its merge-base with
    the upstream tracking branch.
    """
    last_tag = latest_fork_tag(state.fork_tags, tag_prefix)
    if last_tag is not None:
        return Ok(ChangelogBase(ref=last_tag, origin=BaseOrigin.PRIOR_FORK_TAG, tag=last_tag))

    if state.upstream_merge_base is None:
        return Err(
            ReleaseError(
                kind="no_changelog_base",
                message=(
                    "cannot determine changelog base: no prior fork tag "
                    f"and no common ancestor with {upstream_ref}"
                ),
                hint=f"Fetch the upstream remote so {upstream_ref} resolves, then retry.",
            )
        )

    return Ok(ChangelogBase(ref=state.upstream_merge_base, origin=BaseOrigin.UPSTREAM_MERGE_BASE))
