# src/tddguard/cli/main.py

"""
Main CLI entry point for tddguard using Click.
Handles global options like logging level.
"""

from importlib.metadata import PackageNotFoundError, version

import click
import structlog

from tddguard.cli.run_cmds import run_cli, where_cli
from tddguard.cli.utils import logging_options, setup_logging_from_context
from tddguard.telemetry import StructLogger

try:
    __version__ = version("tddguard")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

log: StructLogger = structlog.get_logger("cli.main")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", package_name="tddguard")
@logging_options
@click.pass_context
def cli(
    ctx: click.Context,
    log_level: str | None,
    log_file: str | None,
    json_logs: bool | None,
):
    """
    tddguard: Test result capture for TDD Guard.

    Runs a test tool and guarantees a result file, even when the code under
    test does not build.
    """
    ctx.ensure_object(dict)

    ctx.obj["LOG_LEVEL"] = log_level
    ctx.obj["LOG_FILE"] = log_file
    ctx.obj["JSON_LOGS"] = json_logs if json_logs is not None else False

    setup_logging_from_context(ctx)
    log.debug(
        "Main CLI group initialized",
        log_level=log_level,
        log_file=log_file,
        json_logs=json_logs,
    )


cli.add_command(run_cli)
cli.add_command(where_cli)

if __name__ == "__main__":
    cli()

# 🖥️⚙️
