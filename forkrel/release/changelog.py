"""Changelog entry rendering and splicing.

Entry layout (sections after "Fork Changes" are omitted when empty, except
"Upstream Baseline" which is always present):

    ## [0.3.0] - 2026-10-17 (fork)

    ### Fork Changes

    - 1a2b3c4 Add retry to webhook sender

    ### Docs / CI Changes

    - 5d6e7f8 Document retry settings

    ### Upstream Syncs

    - 9a8b7c6 Merge upstream/main

    ### Upstream Baseline

    - upstream/main: 0f1e2d3
"""

from __future__ import annotations

import re
from datetime import date
from pathlib import Path

from forkrel.core.result import Err, Ok, Result
from forkrel.release.errors import ReleaseError
from forkrel.release.model import (
    CategorizedCommits,
    ChangelogEntry,
    ChangelogSection,
    PendingWrite,
    UpstreamBaseline,
)

FORK_CHANGES = "Fork Changes"
DOCS_CI_CHANGES = "Docs / CI Changes"
UPSTREAM_SYNCS = "Upstream Syncs"
UPSTREAM_BASELINE = "Upstream Baseline"

NO_CODE_CHANGES = "(no code changes since last fork release)"

# Lines kept above the new entry when there is no [Unreleased] marker.
HEADER_LINES = 6

_UNRELEASED_RE = re.compile(r"^## \[Unreleased\]")


def build_entry(
    *,
    version: str,
    today: date,
    commits: CategorizedCommits,
    baseline: UpstreamBaseline,
) -> ChangelogEntry:
    sections: list[ChangelogSection] = []

    code = tuple(c.line for c in commits.code_changes) or (NO_CODE_CHANGES,)
    sections.append(ChangelogSection(heading=FORK_CHANGES, lines=code))

    if commits.docs_ci_changes:
        sections.append(
            ChangelogSection(
                heading=DOCS_CI_CHANGES,
                lines=tuple(c.line for c in commits.docs_ci_changes),
            )
        )

    if commits.upstream_sync_merges:
        sections.append(
            ChangelogSection(
                heading=UPSTREAM_SYNCS,
                lines=tuple(c.line for c in commits.upstream_sync_merges),
            )
        )

    sections.append(
        ChangelogSection(
            heading=UPSTREAM_BASELINE,
            lines=(f"{baseline.label}: {baseline.display_hash}",),
        )
    )

    return ChangelogEntry(version=version, date=today, sections=tuple(sections))


def render_entry(entry: ChangelogEntry) -> str:
    """Render an entry as Markdown; the result ends with a single newline."""
    lines = [f"## [{entry.version}] - {entry.date.isoformat()} (fork)"]
    for section in entry.sections:
        lines.append("")
        lines.append(f"### {section.heading}")
        lines.append("")
        lines.extend(f"- {line}" for line in section.lines)
    return "\n".join(lines) + "\n"


def splice_changelog(existing: str | None, entry_text: str) -> str:
    """Insert a rendered entry into changelog text.

    - no file: a "# Changelog" heading followed by the entry;
    - a "## [Unreleased]" line: the entry goes right after the first one;
    - otherwise: the entry goes after the first HEADER_LINES lines.
    """
    if existing is None:
        return f"# Changelog\n\n{entry_text}"

    lines = existing.splitlines(keepends=True)

    split = HEADER_LINES
    for idx, line in enumerate(lines):
        if _UNRELEASED_RE.match(line):
            split = idx + 1
            break

    head = "".join(lines[:split])
    rest = "".join(lines[split:])
    if head and not head.endswith("\n"):
        head += "\n"
    return f"{head}\n{entry_text}\n{rest}"


def plan_changelog_write(path: Path, entry_text: str) -> Result[PendingWrite, ReleaseError]:
    """Compute the new changelog content without touching the file."""
    existing: str | None
    try:
        existing = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        existing = None
    except (OSError, UnicodeDecodeError) as e:
        return Err(
            ReleaseError(
                kind="io_failed",
                message=f"failed to read {path.name}: {e}",
                hint=str(path),
            )
        )

    return Ok(
        PendingWrite(
            path=path,
            content=splice_changelog(existing, entry_text),
            created=existing is None,
        )
    )
