from __future__ import annotations

from forkrel.core.result import Err, Ok
from forkrel.release.base import resolve_changelog_base
from forkrel.release.model import BaseOrigin, ChangelogBase, RepositoryState


def _state(
    *,
    fork_tags: tuple[str, ...] = (),
    merge_base: str | None = None,
) -> RepositoryState:
    return RepositoryState(
        local_tags=frozenset(fork_tags),
        remote_tags=frozenset(),
        fork_tags=fork_tags,
        upstream_merge_base=merge_base,
        upstream_head="0f1e2d3",
        current_branch="main",
    )


def test_greatest_fork_tag_wins_over_lexical_order() -> None:
    state = _state(fork_tags=("fork-v0.2.0", "fork-v0.10.0"), merge_base="abc123")

    result = resolve_changelog_base(state, tag_prefix="fork-v", upstream_ref="upstream/main")

    assert result == Ok(
        ChangelogBase(ref="fork-v0.10.0", origin=BaseOrigin.PRIOR_FORK_TAG, tag="fork-v0.10.0")
    )


def test_merge_base_when_no_fork_tags() -> None:
    state = _state(merge_base="abc123def4567890")

    result = resolve_changelog_base(state, tag_prefix="fork-v", upstream_ref="upstream/main")

    assert isinstance(result, Ok)
    assert result.value.ref == "abc123def4567890"
    assert result.value.origin is BaseOrigin.UPSTREAM_MERGE_BASE
    assert result.value.tag is None
    assert result.value.short_ref == "abc123def456"


def test_no_base_is_an_error() -> None:
    result = resolve_changelog_base(_state(), tag_prefix="fork-v", upstream_ref="upstream/main")

    assert isinstance(result, Err)
    assert result.error.kind == "no_changelog_base"
    assert "upstream/main" in result.error.message
    assert result.error.hint is not None
