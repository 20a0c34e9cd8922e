from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import NoReturn

import click
import typer

from forkrel.cli.context import CLIContext, build_context
from forkrel.core.errors import ErrorCode
from forkrel.core.result import Err
from forkrel.output.console import Style
from forkrel.release.errors import ReleaseError
from forkrel.release.model import ReleaseOutcome, ReleasePlan, ReleaseRequest
from forkrel.release.planner import PlanState, execute_plan, plan_release, render_plan
from forkrel.release.semver import validate_version


app = typer.Typer(
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def release_error_code(kind: str) -> ErrorCode:
    if kind in {"validation", "config_invalid"}:
        return ErrorCode.USER_ERROR
    if kind in {"dirty_tree", "duplicate_tag", "not_a_repo", "manifest_invalid"}:
        return ErrorCode.PRECONDITION_ERROR
    if kind == "no_changelog_base":
        return ErrorCode.RESOLUTION_ERROR
    if kind == "push_failed":
        return ErrorCode.NETWORK_ERROR
    return ErrorCode.IO_ERROR


def exit_release(error: ReleaseError) -> NoReturn:
    typer.echo(f"error: {error.message}", err=True)
    if error.hint:
        typer.echo(f"hint: {error.hint}", err=True)
    raise typer.Exit(code=int(release_error_code(error.kind)))


@app.command()
def release(
    ctx: typer.Context,
    version: str | None = typer.Argument(
        None,
        metavar="VERSION",
        help="Semver version WITHOUT prefix, e.g. 0.2.0 or 0.2.0-rc.1",
        show_default=False,
    ),
    push: bool = typer.Option(
        False,
        "--push",
        help="Push the version commit and tag to origin after creating them.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would happen without modifying anything.",
    ),
) -> None:
    """Cut a fork release: bump the version, prepend a changelog entry and
    create an annotated fork-v<VERSION> tag that cannot collide with upstream tags.

    The changelog covers commits since the last fork tag, or since the
    upstream divergence point when there is no prior fork release.
    """
    if version is None:
        typer.echo(ctx.get_usage(), err=True)
        typer.echo(f"Try '{ctx.command_path} -h' for help.", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    valid = validate_version(version)
    if isinstance(valid, Err):
        exit_release(valid.error)

    cli = build_context()
    request = ReleaseRequest(version=version, push=push, dry_run=dry_run)

    def on_state(state: PlanState) -> None:
        cli.console.print(f"-> {state}", Style.DIM)

    planned = plan_release(
        request,
        vcs=cli.repo,
        config=cli.config,
        console=cli.console,
        today=date.today(),
        on_state=on_state,
    )
    if isinstance(planned, Err):
        exit_release(planned.error)
    plan = planned.value

    cli.console.newline()
    for line in render_plan(plan, cli.config):
        cli.console.print(line)
    cli.console.newline()

    if dry_run:
        on_state(PlanState.DRY_RUN_REPORT)
        cli.console.info("Done (dry-run).")
        return

    executed = execute_plan(
        plan,
        vcs=cli.repo,
        config=cli.config,
        console=cli.console,
        on_state=on_state,
    )
    if isinstance(executed, Err):
        exit_release(executed.error)

    _print_summary(cli, plan, executed.value)


def _print_summary(cli: CLIContext, plan: ReleasePlan, outcome: ReleaseOutcome) -> None:
    console = cli.console
    origin = cli.config.remotes.origin
    branch = plan.current_branch or "<branch>"

    if outcome.pushed:
        console.success(f"Tag {outcome.tag} pushed to {origin}.")
    else:
        console.info("Done. To push:")
        console.print(f"  git push {origin} {branch}", Style.DIM)
        console.print(f"  git push {origin} {outcome.tag}", Style.DIM)

    if outcome.warnings:
        console.header("Warnings")
        for warning in outcome.warnings:
            console.print(f"- {warning.message}", Style.WARNING)

    console.newline()
    console.success(f"Release {outcome.tag} complete.")
    console.header("Next steps")
    console.print(f"  - Verify the tag: git show {outcome.tag}")
    for step in cli.config.release.next_steps:
        console.print(f"  - {step}")


def main(argv: Sequence[str] | None = None) -> int:
    """Console-script entry point; returns the process exit code.

    Usage errors (unknown flag, extra argument) exit with USER_ERROR
    rather than click's default of 2.
    """
    try:
        rv = app(args=list(argv) if argv is not None else None, standalone_mode=False)
    except click.UsageError as e:
        e.show()
        return int(ErrorCode.USER_ERROR)
    except click.ClickException as e:
        e.show()
        return e.exit_code
    except click.exceptions.Abort:
        typer.echo("Aborted!", err=True)
        return int(ErrorCode.USER_ERROR)
    return rv if isinstance(rv, int) else int(ErrorCode.OK)
