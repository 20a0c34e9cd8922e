"""Helpers for reading untyped TOML data with runtime validation."""

from __future__ import annotations

from typing import Mapping, TypeGuard, cast

StrDict = dict[str, object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    if is_str_dict(obj):
        return obj
    return None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Get a string value, stripping whitespace.

    Returns None if missing, not a str, or empty after stripping.
    """
    value = table.get(key)
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def get_str_or_empty(table: Mapping[str, object], key: str) -> str | None:
    """Get a stripped string, keeping an explicit empty value.

    Raises:
        TypeError: If the key is present but is not a string.
    """
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError(f"'{key}' must be a string")
    return value.strip()


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    return as_str_dict(table.get(key))


def get_str_list(table: Mapping[str, object], key: str) -> list[str] | None:
    """Get a list of non-empty strings.

    Raises:
        TypeError: If the key is present but is not a list of strings.
    """
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise TypeError(f"'{key}' must be a list of strings")
    items = cast(list[object], value)
    out: list[str] = []
    for item in items:
        if not isinstance(item, str) or not item.strip():
            raise TypeError(f"'{key}' must be a list of non-empty strings")
        out.append(item.strip())
    return out


def get_command_list(table: Mapping[str, object], key: str) -> list[tuple[str, ...]] | None:
    """Get a list of argv commands (a list of lists of strings).

    Raises:
        TypeError: If the key is present but malformed.
    """
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise TypeError(f"'{key}' must be a list of commands")
    commands: list[tuple[str, ...]] = []
    for raw in cast(list[object], value):
        if not isinstance(raw, list) or not raw:
            raise TypeError(f"'{key}' entries must be non-empty lists of strings")
        argv = cast(list[object], raw)
        if not all(isinstance(a, str) for a in argv):
            raise TypeError(f"'{key}' entries must be non-empty lists of strings")
        commands.append(tuple(cast(list[str], argv)))
    return commands
