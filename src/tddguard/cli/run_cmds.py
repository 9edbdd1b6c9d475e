# src/tddguard/cli/run_cmds.py

import asyncio
import logging
from pathlib import Path

import click
import structlog

from tddguard.capture import resolve_project_root, result_path
from tddguard.config import PROJECT_ROOT_ENV_VAR, TOOL_ENV_VAR, load_config
from tddguard.exceptions import ConfigurationError
from tddguard.telemetry import StructLogger
from tddguard.testing.factory import PROFILE_MAP
from tddguard.testing.supervisor import TestSupervisor

log: StructLogger = structlog.get_logger("cli.run")

project_root_option = click.option(
    "--project-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    envvar=PROJECT_ROOT_ENV_VAR,
    show_envvar=True,
    help="Absolute directory that receives .claude/tdd-guard/data/test.json.",
)


def _exit_status(exit_code: int) -> int:
    """Maps a signal-terminated child (negative code) to the shell's 128+N."""
    return 128 - exit_code if exit_code < 0 else exit_code


def _run_supervisor(supervisor: TestSupervisor, tool_args: list[str]) -> int:
    """
    Runs the supervisor to completion and returns the exit code to report.
    """
    try:
        run = asyncio.run(supervisor.run(tool_args))
        log.debug("Supervised run finished", outcome=run.outcome.name, exit_code=run.exit_code)
        return _exit_status(run.exit_code)
    except KeyboardInterrupt:
        # asyncio.run() has already cancelled the run, which stops the child.
        log.warning("Shutdown initiated by KeyboardInterrupt (CTRL-C).")
        return 130
    except Exception:
        log.critical("Supervisor exited with an unhandled exception.", exc_info=True)
        return 1
    finally:
        logging.shutdown()


@click.command(
    name="run",
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
)
@click.option(
    "--tool",
    type=click.Choice(sorted(PROFILE_MAP), case_sensitive=False),
    default=None,
    envvar=TOOL_ENV_VAR,
    show_envvar=True,
    help="Test tool to run (default: pytest).",
)
@project_root_option
@click.argument("tool_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def run_cli(
    ctx: click.Context,
    tool: str | None,
    project_root: Path | None,
    tool_args: tuple[str, ...],
):
    """Run the test tool and record its results for TDD Guard.

    Every TOOL_ARGS value is passed to the tool unchanged; the exit code is
    the tool's own. Put "--" in front of tool arguments that look like
    options of this command.
    """
    try:
        config = load_config(tool=tool, project_root=project_root)
        supervisor = TestSupervisor.from_config(config, working_dir=Path.cwd())
    except ConfigurationError as e:
        log.error("Invalid configuration", error=str(e))
        click.echo(f"Error: {e}", err=True)
        ctx.exit(2)

    log.info("Starting supervised test run", tool=config.tool, args=list(tool_args))
    exit_code = _run_supervisor(supervisor, list(tool_args))
    ctx.exit(exit_code)


@click.command(name="where")
@project_root_option
@click.pass_context
def where_cli(ctx: click.Context, project_root: Path | None):
    """Show the resolved project root and result file location."""
    try:
        config = load_config(project_root=project_root)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(2)

    root = resolve_project_root(config.project_root, Path.cwd())
    click.echo(f"Project root: {root}")
    click.echo(f"Result file:  {result_path(root)}")

# 🔼⚙️
