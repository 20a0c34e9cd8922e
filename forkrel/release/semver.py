from __future__ import annotations

import re
from collections.abc import Iterable

from forkrel.core.result import Err, Ok, Result
from forkrel.release.errors import ReleaseError


VERSION_RE = re.compile(r"^[0-9]+\.[0-9]+\.[0-9]+([.-][0-9A-Za-z.-]+)?$")
_PARTS_RE = re.compile(r"^([0-9]+)\.([0-9]+)\.([0-9]+)(?:([.-])(.+))?$")

# Rank of the suffix relative to the bare MAJOR.MINOR.PATCH.
_PRERELEASE = 0
_RELEASE = 1
_EXTENSION = 2

type _Ident = tuple[int, int, str]
type VersionKey = tuple[int, int, int, int, int, tuple[_Ident, ...], str]


def validate_version(text: str) -> Result[str, ReleaseError]:
    """Check text against MAJOR.MINOR.PATCH[(.|-)SUFFIX]."""
    if VERSION_RE.match(text) is None:
        return Err(
            ReleaseError(
                kind="validation",
                message=f"version must be semver (got: {text})",
                hint="Expected MAJOR.MINOR.PATCH, e.g. 0.2.0 or 0.2.0-rc.1 (no tag prefix)",
            )
        )
    return Ok(text)


def _ident_key(ident: str) -> _Ident:
    # Numeric identifiers sort numerically and below alphanumeric ones.
    if ident.isdigit():
        return (0, int(ident), "")
    return (1, 0, ident)


def version_sort_key(version: str) -> VersionKey:
    """Sort key implementing semantic-version precedence.

    ``1.0.0-rc.1 < 1.0.0 < 1.0.0.1`` and ``0.2.0 < 0.10.0``. Strings that are
    not versions sort below every version, by their raw text.
    """
    m = _PARTS_RE.match(version)
    if m is None or VERSION_RE.match(version) is None:
        return (0, 0, 0, 0, 0, (), version)

    major, minor, patch = int(m.group(1)), int(m.group(2)), int(m.group(3))
    sep, suffix = m.group(4), m.group(5)
    if sep is None:
        rank = _RELEASE
        idents: tuple[_Ident, ...] = ()
    else:
        rank = _PRERELEASE if sep == "-" else _EXTENSION
        idents = tuple(_ident_key(part) for part in suffix.split("."))
    return (1, major, minor, patch, rank, idents, version)


def parse_fork_tag(tag: str, prefix: str) -> str | None:
    """Version part of a fork tag, or None if tag is outside the namespace."""
    if not tag.startswith(prefix):
        return None
    return tag[len(prefix) :]


def latest_fork_tag(tags: Iterable[str], prefix: str) -> str | None:
    """Greatest fork tag by version precedence (never lexical or by date)."""
    candidates = [t for t in tags if parse_fork_tag(t, prefix) is not None]
    if not candidates:
        return None
    return max(candidates, key=lambda t: version_sort_key(t[len(prefix) :]))
