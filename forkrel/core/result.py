"""Result type for explicit error handling.

Every step of a release either succeeds with a value or fails with a
structured error. Steps return ``Ok``/``Err`` instead of raising, so the
planner can stop at the first failure without try/except scaffolding.

Usage:
    def read_manifest(path: Path) -> Result[str, ReleaseError]:
        if not path.is_file():
            return Err(ReleaseError(kind="manifest_invalid", message=f"missing {path}"))
        return Ok(path.read_text(encoding="utf-8"))

    match read_manifest(Path("Cargo.toml")):
        case Ok(text):
            print(len(text))
        case Err(error):
            print(error.message)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful result carrying a value."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failed result carrying an error."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
