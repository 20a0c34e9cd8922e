"""Release state machine.

    VALIDATING -> PROBING_PRECONDITIONS -> RESOLVING_BASE -> COLLECTING_COMMITS
      -> BUILDING_ENTRY -> DRY_RUN_REPORT
                        -> BUMPING -> WRITING -> COMMITTING -> TAGGING [-> PUSHING] -> DONE

``plan_release`` covers everything up to BUILDING_ENTRY and has no side
effects besides fetching remotes: the new manifest and changelog contents
are computed in memory. ``execute_plan`` applies them.

Execution is not transactional. BUMPING writes the manifest and changelog
together; any failure from there on leaves the working tree modified and
the returned error carries a hint naming the files to reset.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from enum import Enum

from forkrel.core.config import ReleaseConfig
from forkrel.core.result import Err, Ok, Result
from forkrel.output.console import ConsoleProtocol
from forkrel.platform.files import atomic_write_many
from forkrel.release.base import resolve_changelog_base
from forkrel.release.changelog import build_entry, plan_changelog_write, render_entry
from forkrel.release.collector import collect_commits
from forkrel.release.committer import commit_release, push_release, tag_release
from forkrel.release.errors import ReleaseError, ReleaseWarning
from forkrel.release.manifest import plan_manifest_write, regenerate_lockfile
from forkrel.release.model import (
    ForkTag,
    ReleaseOutcome,
    ReleasePlan,
    ReleaseRequest,
    UpstreamBaseline,
)
from forkrel.release.state import (
    assert_clean_tree,
    assert_local_tag_available,
    assert_tag_available,
    fetch_remotes,
    snapshot_state,
)
from forkrel.release.semver import validate_version
from forkrel.release.vcs import VcsBackend


class PlanState(Enum):
    VALIDATING = "validating"
    PROBING_PRECONDITIONS = "probing preconditions"
    RESOLVING_BASE = "resolving base"
    COLLECTING_COMMITS = "collecting commits"
    BUILDING_ENTRY = "building entry"
    DRY_RUN_REPORT = "dry-run report"
    BUMPING = "bumping"
    WRITING = "writing"
    COMMITTING = "committing"
    TAGGING = "tagging"
    PUSHING = "pushing"
    DONE = "done"

    def __str__(self) -> str:
        return self.value


StateHook = Callable[[PlanState], None]


def _noop(_: PlanState) -> None:
    return None


def plan_release(
    request: ReleaseRequest,
    *,
    vcs: VcsBackend,
    config: ReleaseConfig,
    console: ConsoleProtocol,
    today: date,
    on_state: StateHook = _noop,
) -> Result[ReleasePlan, ReleaseError]:
    on_state(PlanState.VALIDATING)
    valid = validate_version(request.version)
    if isinstance(valid, Err):
        return valid
    tag = ForkTag(version=request.version, prefix=config.release.tag_prefix)

    on_state(PlanState.PROBING_PRECONDITIONS)
    clean = assert_clean_tree(vcs, dry_run=request.dry_run)
    if isinstance(clean, Err):
        return clean
    local_ok = assert_local_tag_available(vcs, tag.name)
    if isinstance(local_ok, Err):
        return local_ok

    console.info("Fetching remotes...")
    warnings: list[ReleaseWarning] = fetch_remotes(vcs, config.remotes, console)

    snap = snapshot_state(vcs, config, console)
    if isinstance(snap, Err):
        return snap
    state, snap_warnings = snap.value
    warnings.extend(snap_warnings)

    available = assert_tag_available(state, tag.name, remote=config.remotes.origin)
    if isinstance(available, Err):
        return available

    on_state(PlanState.RESOLVING_BASE)
    base_r = resolve_changelog_base(
        state,
        tag_prefix=config.release.tag_prefix,
        upstream_ref=config.remotes.upstream_ref,
    )
    if isinstance(base_r, Err):
        return base_r
    base = base_r.value
    if base.tag is not None:
        console.info(f"Last fork release: {base.tag}")
    else:
        console.info(
            f"No prior fork release found; using upstream divergence point: {base.short_ref}"
        )

    on_state(PlanState.COLLECTING_COMMITS)
    commits = collect_commits(vcs, base, config.changelog)
    if isinstance(commits, Err):
        return commits

    on_state(PlanState.BUILDING_ENTRY)
    baseline = UpstreamBaseline(
        remote=config.remotes.upstream,
        branch=config.remotes.upstream_branch,
        short_hash=state.upstream_head,
    )
    entry = build_entry(
        version=request.version,
        today=today,
        commits=commits.value,
        baseline=baseline,
    )
    entry_text = render_entry(entry)

    manifest = plan_manifest_write(vcs.path / config.release.manifest, request.version)
    if isinstance(manifest, Err):
        return manifest
    changelog = plan_changelog_write(vcs.path / config.release.changelog, entry_text)
    if isinstance(changelog, Err):
        return changelog

    return Ok(
        ReleasePlan(
            request=request,
            tag=tag,
            base=base,
            commits=commits.value,
            baseline=baseline,
            entry=entry,
            entry_text=entry_text,
            manifest=manifest.value,
            changelog=changelog.value,
            current_branch=state.current_branch,
            warnings=tuple(warnings),
        )
    )


def render_plan(plan: ReleasePlan, config: ReleaseConfig) -> list[str]:
    """Plan report lines; identical for identical plans."""
    commits = plan.commits
    lines = [
        "Release plan:",
        f"  Version:        {plan.request.version}",
        f"  Tag:            {plan.tag.name}",
        f"  Changelog base: {plan.base.short_ref} ({plan.base.origin})",
        (
            f"  Commits:        {len(commits.code_changes)} code, "
            f"{len(commits.docs_ci_changes)} docs/ci, "
            f"{len(commits.upstream_sync_merges)} upstream syncs"
        ),
        f"  Push:           {'yes' if plan.request.push else 'no'}",
        "",
        "Changelog entry:",
    ]
    lines.extend(f"  {ln}" if ln else "" for ln in plan.entry_text.rstrip("\n").split("\n"))

    if plan.request.dry_run:
        action = "create" if plan.changelog.created else "prepend changelog entry to"
        lines.append("")
        lines.append(
            f"[dry-run] Would bump {config.release.manifest} version to {plan.request.version}"
        )
        lines.append(f"[dry-run] Would {action} {config.release.changelog}")
        lines.append(f"[dry-run] Would create tag: {plan.tag.name}")
        if plan.request.push:
            lines.append(f"[dry-run] Would push to {config.remotes.origin}")
    return lines


def _reset_hint(config: ReleaseConfig) -> str:
    files = " ".join(
        (config.release.manifest, config.release.changelog, config.release.lockfile)
    )
    return f"The working tree was left modified; reset it with: git checkout -- {files}"


def execute_plan(
    plan: ReleasePlan,
    *,
    vcs: VcsBackend,
    config: ReleaseConfig,
    console: ConsoleProtocol,
    on_state: StateHook = _noop,
) -> Result[ReleaseOutcome, ReleaseError]:
    """Apply a plan: write files, commit, tag and optionally push.

    BUMPING writes the buffered manifest and changelog in one batch.
    WRITING refreshes the lockfile; COMMITTING stages and commits.
    """
    if plan.request.dry_run:
        raise ValueError("execute_plan called with a dry-run plan")

    settings = config.release
    warnings = list(plan.warnings)

    on_state(PlanState.BUMPING)
    console.info(f"Bumping version to {plan.request.version} in {settings.manifest}...")
    console.info(f"Updating {settings.changelog}...")
    try:
        atomic_write_many(
            [
                (plan.manifest.path, plan.manifest.content),
                (plan.changelog.path, plan.changelog.content),
            ]
        )
    except OSError as e:
        return Err(
            ReleaseError(
                kind="io_failed",
                message=f"failed to write release files: {e}",
                hint=_reset_hint(config),
            )
        )

    on_state(PlanState.WRITING)
    console.info(f"Updating {settings.lockfile}...")
    lock_warning = regenerate_lockfile(
        repo_root=vcs.path,
        commands=settings.lockfile_commands,
        console=console,
    )
    if lock_warning is not None:
        warnings.append(lock_warning)
    lockfile_updated = False
    if lock_warning is None:
        modified = vcs.is_modified(settings.lockfile)
        if isinstance(modified, Err):
            unchecked = ReleaseWarning(
                kind="lockfile",
                message=(
                    f"could not check whether {settings.lockfile} changed; "
                    "it was not committed"
                ),
            )
            console.warning(unchecked.message)
            warnings.append(unchecked)
        else:
            lockfile_updated = modified.value

    paths = [settings.manifest, settings.changelog]
    if lockfile_updated:
        paths.append(settings.lockfile)

    on_state(PlanState.COMMITTING)
    console.info("Committing version bump and changelog...")
    committed = commit_release(vcs, plan, paths=paths, console=console)
    if isinstance(committed, Err):
        e = committed.error
        hint = _reset_hint(config) if e.hint is None else f"{e.hint}\n{_reset_hint(config)}"
        return Err(ReleaseError(kind=e.kind, message=e.message, hint=hint))

    on_state(PlanState.TAGGING)
    console.info(f"Creating annotated tag: {plan.tag.name}")
    project_name = settings.project_name or vcs.name
    tagged = tag_release(vcs, plan, project_name=project_name, console=console)
    if isinstance(tagged, Err):
        e = tagged.error
        return Err(
            ReleaseError(
                kind=e.kind,
                message=f"{e.message} (release commit {committed.value[:12]} was created)",
                hint=e.hint,
            )
        )

    pushed = False
    if plan.request.push:
        on_state(PlanState.PUSHING)
        console.info(
            f"Pushing {plan.current_branch} and tag {plan.tag.name} to {config.remotes.origin}..."
        )
        push = push_release(
            vcs,
            remote=config.remotes.origin,
            branch=plan.current_branch,
            tag=plan.tag.name,
            console=console,
        )
        if isinstance(push, Err):
            return push
        pushed = True

    on_state(PlanState.DONE)
    return Ok(
        ReleaseOutcome(
            tag=plan.tag.name,
            commit_sha=committed.value,
            lockfile_updated=lockfile_updated,
            pushed=pushed,
            warnings=tuple(warnings),
        )
    )
