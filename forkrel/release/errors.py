"""Error and warning payloads for the release flow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "validation",
    "dirty_tree",
    "duplicate_tag",
    "no_changelog_base",
    "not_a_repo",
    "manifest_invalid",
    "config_invalid",
    "vcs_failed",
    "io_failed",
    "push_failed",
]

ReleaseWarningKind = Literal["network", "lockfile"]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """A fatal release failure.

    Rendered by the CLI as ``error: <message>`` plus an optional hint line.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ReleaseWarning:
    """A recoverable failure; the release continues."""

    kind: ReleaseWarningKind
    message: str
