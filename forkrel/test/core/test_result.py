"""Tests for core/result.py."""

from __future__ import annotations

import pytest

from forkrel.core.result import Err, Ok, Result


def _half(n: int) -> Result[int, str]:
    if n % 2:
        return Err(f"{n} is odd")
    return Ok(n // 2)


def test_repr() -> None:
    assert repr(Ok("a")) == "Ok('a')"
    assert repr(Err("boom")) == "Err('boom')"


def test_equality_and_immutability() -> None:
    assert Ok(2) == Ok(2)
    assert Ok(2) != Err(2)
    with pytest.raises(AttributeError):
        Ok(2).value = 3  # type: ignore[misc]


def test_isinstance_narrowing() -> None:
    result = _half(4)
    assert isinstance(result, Ok)
    assert result.value == 2
    assert isinstance(_half(3), Err)


def test_pattern_matching() -> None:
    match _half(3):
        case Ok(_):
            pytest.fail("expected Err")
        case Err(message):
            assert message == "3 is odd"
