from __future__ import annotations

from forkrel.core.result import Err, Ok, Result
from forkrel.output.console import ConsoleProtocol, Style
from forkrel.release.errors import ReleaseError
from forkrel.release.model import ReleasePlan
from forkrel.release.vcs import VcsBackend


def commit_message(plan: ReleasePlan) -> str:
    baseline = plan.baseline
    return (
        f"release: {plan.tag.name}\n"
        "\n"
        f"Fork release {plan.request.version}.\n"
        f"Upstream baseline: {baseline.label} @ {baseline.display_hash}"
    )


def tag_message(plan: ReleasePlan, *, project_name: str) -> str:
    baseline = plan.baseline
    return (
        f"{project_name} fork release {plan.request.version}\n"
        "\n"
        f"Upstream baseline: {baseline.label} @ {baseline.display_hash}\n"
        f"Fork-only commits since {plan.base.ref[:12]}: {len(plan.commits.code_changes)}"
    )


def commit_release(
    vcs: VcsBackend,
    plan: ReleasePlan,
    *,
    paths: list[str],
    console: ConsoleProtocol,
) -> Result[str, ReleaseError]:
    """Stage paths and create the release commit; returns the commit hash."""
    console.print(f"git add -- {' '.join(paths)}", Style.DIM)
    added = vcs.add(paths)
    if isinstance(added, Err):
        return Err(
            ReleaseError(kind="vcs_failed", message="git add failed", hint=added.error.message)
        )

    console.print(f"git commit -m 'release: {plan.tag.name}'", Style.DIM)
    committed = vcs.commit(commit_message(plan))
    if isinstance(committed, Err):
        return Err(
            ReleaseError(
                kind="vcs_failed",
                message="git commit failed",
                hint=committed.error.message or "Configure git user.name/user.email, then retry.",
            )
        )
    return Ok(committed.value)


def tag_release(
    vcs: VcsBackend,
    plan: ReleasePlan,
    *,
    project_name: str,
    console: ConsoleProtocol,
) -> Result[None, ReleaseError]:
    console.print(f"git tag -a {plan.tag.name}", Style.DIM)
    tagged = vcs.create_annotated_tag(plan.tag.name, tag_message(plan, project_name=project_name))
    if isinstance(tagged, Err):
        return Err(
            ReleaseError(
                kind="vcs_failed",
                message=f"failed to create tag {plan.tag.name}",
                hint=tagged.error.message,
            )
        )
    return Ok(None)


def push_release(
    vcs: VcsBackend,
    *,
    remote: str,
    branch: str | None,
    tag: str,
    console: ConsoleProtocol,
) -> Result[None, ReleaseError]:
    """Push the release branch, then the tag."""
    if branch is None:
        return Err(
            ReleaseError(
                kind="push_failed",
                message="cannot push from a detached HEAD",
                hint=f"Push manually: git push {remote} {tag}",
            )
        )

    for ref in (branch, tag):
        console.print(f"git push {remote} {ref}", Style.DIM)
        pushed = vcs.push(remote, ref)
        if isinstance(pushed, Err):
            return Err(
                ReleaseError(
                    kind="push_failed",
                    message=f"git push {remote} {ref} failed",
                    hint=pushed.error.message,
                )
            )
    return Ok(None)
