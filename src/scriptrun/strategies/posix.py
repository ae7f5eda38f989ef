"""POSIX shell strategy.

Runs a script body through the platform's default script runner: ``sh -c``
on POSIX systems, a temporary batch file under ``cmd.exe /C`` on Windows.
Multi-line scripts are supported; each line may be a separate statement.

Design follows Function Core / Imperative Shell:
- Pure functions: default_runner, uses_batch_file, build_script_body,
  build_command, stream_target, merged_env
- Imperative shell: PosixShellStrategy.run, PosixShellStrategy.spawn,
  remove_batch_file
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from pathlib import Path

from scriptrun.errors import LaunchFailure
from scriptrun.models import IoMode, ScriptOptions, StrategyKind
from scriptrun.subprocess_result import SubprocessResult, decode_stream

logger = logging.getLogger(__name__)

DEFAULT_POSIX_RUNNER = "sh"
DEFAULT_WINDOWS_RUNNER = "cmd.exe"

# Value of $0 inside the script.
SCRIPT_NAME = "scriptrun"

# ---------------------------------------------------------------------------
# Pure functions
# ---------------------------------------------------------------------------


def default_runner(os_name: str | None = None) -> str:
    """Return the interpreter used when ``ScriptOptions.runner`` is unset."""
    if (os_name or os.name) == "nt":
        return DEFAULT_WINDOWS_RUNNER
    return DEFAULT_POSIX_RUNNER


def uses_batch_file(options: ScriptOptions, os_name: str | None = None) -> bool:
    """True when the script must be written to a batch file for ``cmd.exe``.

    An explicit runner is always driven POSIX-style with ``-c``.
    """
    return options.runner is None and (os_name or os.name) == "nt"


def build_script_body(script: str, options: ScriptOptions, *, batch: bool = False) -> str:
    """Prefix *script* with the shell switches requested by *options*.

    ``cmd.exe`` has no equivalent of ``set -e``; ``exit_on_error`` is ignored
    for batch files.
    """
    if batch:
        header = [] if options.print_commands else ["@echo off"]
        return "\r\n".join([*header, script])

    lines: list[str] = []
    if options.exit_on_error:
        lines.append("set -e")
    if options.print_commands:
        lines.append("set -x")
    lines.append(script)
    return "\n".join(lines)


def build_command(
    runner: str,
    options: ScriptOptions,
    target: str,
    *,
    batch: bool = False,
) -> list[str]:
    """Build the argv for the runner.

    *target* is the script body, or the batch file path when *batch* is set.
    """
    if batch:
        return [runner, *options.runner_args, "/C", target]
    return [runner, *options.runner_args, "-c", target, SCRIPT_NAME]


def stream_target(mode: IoMode) -> int | None:
    """Map an ``IoMode`` to the value ``subprocess`` expects."""
    if mode is IoMode.PIPE:
        return subprocess.PIPE
    if mode is IoMode.NULL:
        return subprocess.DEVNULL
    return None


def merged_env(env_vars: dict[str, str] | None) -> dict[str, str] | None:
    """Overlay *env_vars* on the current environment. None keeps it untouched."""
    if env_vars is None:
        return None
    return {**os.environ, **env_vars}


# ---------------------------------------------------------------------------
# Imperative shell
# ---------------------------------------------------------------------------


def _write_batch_file(body: str) -> Path:
    """Write *body* to a temporary ``.cmd`` file and return its path."""
    fd, name = tempfile.mkstemp(prefix="scriptrun-", suffix=".cmd")
    with os.fdopen(fd, "w", newline="") as handle:
        handle.write(body)
    return Path(name)


class PosixShellStrategy:
    """Run scripts through the platform's default shell."""

    def __init__(self, os_name: str | None = None) -> None:
        self._os_name = os_name or os.name

    @property
    def kind(self) -> StrategyKind:
        return StrategyKind.POSIX

    def executor_options(self, verbose: bool) -> ScriptOptions:
        return ScriptOptions()

    def _prepare(self, script: str, options: ScriptOptions) -> tuple[list[str], Path | None]:
        batch = uses_batch_file(options, self._os_name)
        runner = options.runner or default_runner(self._os_name)
        body = build_script_body(script, options, batch=batch)

        batch_path: Path | None = None
        if batch:
            try:
                batch_path = _write_batch_file(body)
            except OSError as exc:
                msg = f"Failed to write batch file for {runner!r}: {exc}"
                raise LaunchFailure(msg) from exc

        argv = build_command(runner, options, str(batch_path) if batch_path else body, batch=batch)
        return argv, batch_path

    def run(self, script: str, options: ScriptOptions) -> SubprocessResult:
        """Run *script* to completion. Does not raise on non-zero exit."""
        argv, batch_path = self._prepare(script, options)
        logger.debug("Running script with %s", argv[0])
        try:
            completed = subprocess.run(
                argv,
                stdin=stream_target(options.input_redirection),
                stdout=stream_target(options.output_redirection),
                stderr=stream_target(options.output_redirection),
                cwd=options.working_directory,
                env=merged_env(options.env_vars),
            )
        except OSError as exc:
            msg = f"Failed to launch {argv[0]!r}: {exc}"
            raise LaunchFailure(msg) from exc
        finally:
            if batch_path is not None:
                batch_path.unlink(missing_ok=True)

        return SubprocessResult(
            returncode=completed.returncode,
            stdout=decode_stream(completed.stdout, options.encoding, "stdout"),
            stderr=decode_stream(completed.stderr, options.encoding, "stderr"),
        )

    def spawn(self, script: str, options: ScriptOptions) -> subprocess.Popen[bytes]:
        """Launch *script* and return immediately.

        A batch file written for ``cmd.exe`` is left in the temp directory,
        since the child may still be reading it. Pass the reaped child to
        ``remove_batch_file`` to delete it.
        """
        argv, _ = self._prepare(script, options)
        logger.debug("Spawning script with %s", argv[0])
        try:
            return subprocess.Popen(
                argv,
                stdin=stream_target(options.input_redirection),
                stdout=stream_target(options.output_redirection),
                stderr=stream_target(options.output_redirection),
                cwd=options.working_directory,
                env=merged_env(options.env_vars),
            )
        except OSError as exc:
            msg = f"Failed to launch {argv[0]!r}: {exc}"
            raise LaunchFailure(msg) from exc


def remove_batch_file(child: subprocess.Popen[bytes]) -> bool:
    """Delete the batch file a spawned ``cmd.exe`` child was started with.

    Only a ``scriptrun-*.cmd`` file in the temp directory, passed after
    ``/C``, is removed. Call once the child has exited.

    Returns:
        True if a file was deleted.
    """
    argv = child.args
    if not isinstance(argv, (list, tuple)) or len(argv) < 2 or argv[-2] != "/C":
        return False

    path = Path(argv[-1])
    owned = (
        path.name.startswith("scriptrun-")
        and path.suffix == ".cmd"
        and path.parent == Path(tempfile.gettempdir())
    )
    if not owned or not path.exists():
        return False

    path.unlink()
    logger.debug("Removed batch file %s", path)
    return True
