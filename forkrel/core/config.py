"""Typed configuration loading and access.

Configuration lives in an optional ``fork-release.toml`` at the repository
root. Every key is optional; a missing file means defaults.

Example:
    [release]
    tag_prefix = "fork-v"
    manifest = "Cargo.toml"

    [remotes]
    upstream = "upstream"
    upstream_branch = "main"

    [changelog]
    excluded_paths = ["docs/", ".github/"]
    sync_marker = "upstream"
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import (
    StrDict,
    as_str_dict,
    get_command_list,
    get_str,
    get_str_list,
    get_str_or_empty,
    get_table,
)

__all__ = [
    "CONFIG_FILENAME",
    "ChangelogConfig",
    "ConfigError",
    "ReleaseConfig",
    "ReleaseSettings",
    "RemotesConfig",
    "load_config",
    "load_repo_config",
]

CONFIG_FILENAME = "fork-release.toml"

DEFAULT_TAG_PREFIX = "fork-v"
DEFAULT_MANIFEST = "Cargo.toml"
DEFAULT_CHANGELOG = "CHANGELOG.md"
DEFAULT_LOCKFILE = "Cargo.lock"
DEFAULT_LOCKFILE_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("cargo", "generate-lockfile", "--quiet"),
    ("cargo", "check", "--quiet"),
)
DEFAULT_NEXT_STEPS: tuple[str, ...] = ("cargo build --release",)
DEFAULT_EXCLUDED_PATHS: tuple[str, ...] = ("docs/", ".github/")
DEFAULT_SYNC_MARKER = "upstream"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ReleaseSettings:
    """Files touched by a release and the tag namespace."""

    tag_prefix: str = DEFAULT_TAG_PREFIX
    # None: use the repository directory name in the tag message.
    project_name: str | None = None
    manifest: str = DEFAULT_MANIFEST
    changelog: str = DEFAULT_CHANGELOG
    lockfile: str = DEFAULT_LOCKFILE
    # Tried in order until one succeeds.
    lockfile_commands: tuple[tuple[str, ...], ...] = DEFAULT_LOCKFILE_COMMANDS
    next_steps: tuple[str, ...] = DEFAULT_NEXT_STEPS


@dataclass(frozen=True, slots=True)
class RemotesConfig:
    """Names of the fork remote and the tracked upstream branch."""

    origin: str = "origin"
    upstream: str = "upstream"
    upstream_branch: str = "main"

    @property
    def upstream_ref(self) -> str:
        """Remote-tracking ref of the upstream branch (e.g. ``upstream/main``)."""
        return f"{self.upstream}/{self.upstream_branch}"


@dataclass(frozen=True, slots=True)
class ChangelogConfig:
    """Commit categorization policy."""

    excluded_paths: tuple[str, ...] = DEFAULT_EXCLUDED_PATHS
    sync_marker: str = DEFAULT_SYNC_MARKER


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Main configuration container."""

    release: ReleaseSettings = field(default_factory=ReleaseSettings)
    remotes: RemotesConfig = field(default_factory=RemotesConfig)
    changelog: ChangelogConfig = field(default_factory=ChangelogConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ReleaseConfig:
        """Create ReleaseConfig from a mapping (parsed TOML).

        Raises:
            TypeError: If a list-valued key has the wrong shape, or
                ``changelog.sync_marker`` is not a string.
        """
        release: StrDict = get_table(data, "release") or {}
        remotes: StrDict = get_table(data, "remotes") or {}
        changelog: StrDict = get_table(data, "changelog") or {}

        commands = get_command_list(release, "lockfile_commands")
        next_steps = get_str_list(release, "next_steps")
        excluded = get_str_list(changelog, "excluded_paths")
        marker = get_str_or_empty(changelog, "sync_marker")

        return cls(
            release=ReleaseSettings(
                tag_prefix=get_str(release, "tag_prefix") or DEFAULT_TAG_PREFIX,
                project_name=get_str(release, "project_name"),
                manifest=get_str(release, "manifest") or DEFAULT_MANIFEST,
                changelog=get_str(release, "changelog") or DEFAULT_CHANGELOG,
                lockfile=get_str(release, "lockfile") or DEFAULT_LOCKFILE,
                lockfile_commands=(
                    tuple(commands) if commands is not None else DEFAULT_LOCKFILE_COMMANDS
                ),
                next_steps=tuple(next_steps) if next_steps is not None else DEFAULT_NEXT_STEPS,
            ),
            remotes=RemotesConfig(
                origin=get_str(remotes, "origin") or "origin",
                upstream=get_str(remotes, "upstream") or "upstream",
                upstream_branch=get_str(remotes, "upstream_branch") or "main",
            ),
            changelog=ChangelogConfig(
                excluded_paths=tuple(excluded) if excluded is not None else DEFAULT_EXCLUDED_PATHS,
                sync_marker=marker if marker is not None else DEFAULT_SYNC_MARKER,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the config file

    Returns:
        Ok(ReleaseConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ReleaseConfig.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_repo_config(repo_root: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load ``fork-release.toml`` from a repository root, or defaults if absent."""
    path = repo_root / CONFIG_FILENAME
    if not path.exists():
        return Ok(ReleaseConfig())
    return load_config(path)
