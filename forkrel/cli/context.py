from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from forkrel.core.config import CONFIG_FILENAME, ReleaseConfig, load_repo_config
from forkrel.core.errors import ErrorCode
from forkrel.core.result import Err
from forkrel.git.repository import Repository
from forkrel.output.console import ConsoleProtocol, RichConsole
from forkrel.release.vcs import VcsBackend


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo: VcsBackend
    config: ReleaseConfig
    console: ConsoleProtocol


def build_context(cwd: Path | None = None) -> CLIContext:
    """Locate the repository and load its config, exiting on failure."""
    repo_result = Repository.discover(cwd or Path.cwd())
    if isinstance(repo_result, Err):
        typer.echo("error: not in a git repo", err=True)
        typer.echo(f"hint: {repo_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.PRECONDITION_ERROR))
    repo = repo_result.value

    config_result = load_repo_config(repo.path)
    if isinstance(config_result, Err):
        typer.echo(f"error: invalid {CONFIG_FILENAME}: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(repo=repo, config=config_result.value, console=RichConsole())
