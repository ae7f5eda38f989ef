"""CLI entry point for scriptrun.

Provides ``scriptrun run`` and ``scriptrun spawn`` subcommands.

Follows Function Core / Imperative Shell:
- Pure functions: resolve_script, format_process_output
- Imperative shell: configure_logging
- Click commands: main, run, spawn
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import click

from scriptrun.errors import ScriptRunError
from scriptrun.executor import ScriptExecutor
from scriptrun.models import ProcessOutput, StrategyKind
from scriptrun.spawner import ScriptSpawner
from scriptrun.strategies.posix import remove_batch_file
from scriptrun.strategies.registry import get_strategy
from scriptrun.tracing import SCRIPTRUN_OTEL_EXPORTER_ENV, init_tracing, shutdown_tracing

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INFRASTRUCTURE_ERROR = 3

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


# ---------------------------------------------------------------------------
# Pure functions
# ---------------------------------------------------------------------------


def resolve_script(script: str | None, script_file: str | None) -> str:
    """Pick the script body from the positional argument or ``--file``.

    Raises:
        click.UsageError: If both or neither are given.
    """
    if script is not None and script_file is not None:
        raise click.UsageError("Cannot combine a SCRIPT argument with --file.")
    if script_file is not None:
        return Path(script_file).read_text()
    if script is None:
        raise click.UsageError("Provide either a SCRIPT argument or --file.")
    return script


def format_process_output(output: ProcessOutput, *, as_json: bool = False) -> str:
    """Render a ``ProcessOutput`` as the display triple or as JSON."""
    if as_json:
        return output.model_dump_json(indent=2)
    return str(output)


# ---------------------------------------------------------------------------
# Imperative shell
# ---------------------------------------------------------------------------


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING, format=LOG_FORMAT)


# ---------------------------------------------------------------------------
# Click commands
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="scriptrun")
@click.pass_context
def main(ctx: click.Context) -> None:
    """scriptrun: run shell scripts with normalized results."""
    if os.environ.get(SCRIPTRUN_OTEL_EXPORTER_ENV):
        init_tracing()
        ctx.call_on_close(shutdown_tracing)


@main.command()
@click.argument("script", required=False)
@click.option(
    "--file",
    "script_file",
    type=click.Path(exists=True, dir_okay=False),
    help="Read the script from a file.",
)
@click.option(
    "--strategy",
    type=click.Choice([k.value for k in StrategyKind]),
    default=None,
    help="Execution strategy. Defaults to SCRIPTRUN_STRATEGY or the platform default.",
)
@click.option("--verbose", is_flag=True, help="Log the script, its options and the result.")
@click.option("--json", "output_json", is_flag=True, help="Output the result as JSON.")
def run(
    script: str | None,
    script_file: str | None,
    strategy: str | None,
    verbose: bool,
    output_json: bool,
) -> None:
    """Run a script to completion and print <code, stdout, stderr>."""
    body = resolve_script(script, script_file)
    configure_logging(verbose)

    try:
        executor = ScriptExecutor(get_strategy(strategy))
        output = executor.run(body, verbose=verbose)
    except ScriptRunError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_INFRASTRUCTURE_ERROR)

    click.echo(format_process_output(output, as_json=output_json))
    if not output.success():
        sys.exit(EXIT_FAILURE)


@main.command()
@click.argument("script", required=False)
@click.option(
    "--file",
    "script_file",
    type=click.Path(exists=True, dir_okay=False),
    help="Read the script from a file.",
)
@click.option("--wait", is_flag=True, help="Wait for the script and exit with its return code.")
def spawn(script: str | None, script_file: str | None, wait: bool) -> None:
    """Launch a script in the foreground and print its PID."""
    body = resolve_script(script, script_file)
    configure_logging(False)

    try:
        child = ScriptSpawner().spawn(body)
    except ScriptRunError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_INFRASTRUCTURE_ERROR)

    click.echo(str(child.pid))
    if wait:
        returncode = child.wait()
        remove_batch_file(child)
        sys.exit(returncode)
