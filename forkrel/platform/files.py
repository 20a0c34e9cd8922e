"""Filesystem helpers."""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Sequence
from pathlib import Path

__all__ = ["atomic_write_many"]


def _target_mode(path: Path) -> int:
    """Permission bits the replaced file should end up with.

    An existing file keeps its mode; a new one gets what ``open()`` would
    give it under the current umask.
    """
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def _stage(path: Path, content: str, *, encoding: str) -> Path:
    """Write content to a temp file next to path and return the temp path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = _target_mode(path)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        # mkstemp creates 0600 files and os.replace keeps that mode.
        os.chmod(tmp_path, mode)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return tmp_path


def atomic_write_many(
    writes: Sequence[tuple[Path, str]],
    *,
    encoding: str = "utf-8",
) -> None:
    """Write several files, staging all of them before replacing any.

    Every target is first written to a temp file in its own directory. Only
    when all temp files exist are they moved into place, so a failure while
    staging leaves every target untouched. A failure during the final
    replace loop can still leave earlier targets replaced. Targets keep
    their permission bits.

    Raises:
        OSError: If staging or replacing fails. Temp files are removed.
    """
    staged: list[tuple[Path, Path]] = []
    try:
        for path, content in writes:
            staged.append((_stage(path, content, encoding=encoding), path))
        for tmp_path, path in staged:
            os.replace(tmp_path, path)
    finally:
        for tmp_path, _ in staged:
            if tmp_path.exists():
                tmp_path.unlink(missing_ok=True)
