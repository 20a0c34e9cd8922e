from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

from forkrel.core.result import Err, Ok, Result
from forkrel.output.console import ConsoleProtocol, Style
from forkrel.platform.process import run as run_process
from forkrel.release.errors import ReleaseError, ReleaseWarning
from forkrel.release.model import PendingWrite

_LOCKFILE_TIMEOUT_SECONDS = 10 * 60.0

# First line-anchored version field: the package's own, not a dependency's.
_VERSION_RE = re.compile(r'(?m)^version\s*=\s*"([^"]*)"')


def bump_manifest_text(text: str, version: str, *, name: str) -> Result[str, ReleaseError]:
    """Rewrite the first ``version = "..."`` line, leaving the rest untouched."""
    m = _VERSION_RE.search(text)
    if m is None:
        return Err(
            ReleaseError(
                kind="manifest_invalid",
                message=f'missing version = "..." line in {name}',
            )
        )
    return Ok(text[: m.start()] + f'version = "{version}"' + text[m.end() :])


def plan_manifest_write(path: Path, version: str) -> Result[PendingWrite, ReleaseError]:
    """Compute the bumped manifest content without touching the file."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(
            ReleaseError(
                kind="manifest_invalid",
                message=f"cannot find {path.name}",
                hint=str(path),
            )
        )
    except (OSError, UnicodeDecodeError) as e:
        return Err(
            ReleaseError(
                kind="io_failed",
                message=f"failed to read {path.name}: {e}",
                hint=str(path),
            )
        )

    bumped = bump_manifest_text(text, version, name=path.name)
    if isinstance(bumped, Err):
        e = bumped.error
        return Err(ReleaseError(kind=e.kind, message=e.message, hint=str(path)))
    return Ok(PendingWrite(path=path, content=bumped.value))


def regenerate_lockfile(
    *,
    repo_root: Path,
    commands: Sequence[Sequence[str]],
    console: ConsoleProtocol,
) -> ReleaseWarning | None:
    """Run the lockfile commands in order until one succeeds.

    Returns a warning when none succeeds; the release proceeds with a
    possibly stale lockfile.
    """
    if not commands:
        return None

    for cmd in commands:
        console.print(" ".join(cmd), Style.DIM)
        result = run_process(list(cmd), cwd=repo_root, timeout=_LOCKFILE_TIMEOUT_SECONDS)
        if isinstance(result, Ok):
            return None
        console.print(result.error.detail(), Style.DIM)

    warning = ReleaseWarning(kind="lockfile", message="could not update lockfile automatically")
    console.warning(warning.message)
    return warning
