"""Hosted scripting engine strategy (PowerShell).

Starts one non-interactive, no-profile session and feeds the whole script
on stdin as a single command string. The engine does not reliably run
multi-line bodies, so callers must join statements with ``;``. This is not
validated here.
"""

from __future__ import annotations

import logging
import os
import subprocess

from scriptrun.errors import LaunchFailure
from scriptrun.models import ScriptOptions, StrategyKind
from scriptrun.strategies.posix import merged_env
from scriptrun.subprocess_result import SubprocessResult, decode_stream

logger = logging.getLogger(__name__)

# Suppresses the console window on Windows; 0 elsewhere.
_CREATE_NO_WINDOW = getattr(subprocess, "CREATE_NO_WINDOW", 0)


def default_engine_encoding(os_name: str | None = None) -> str:
    """Return the encoding of the engine's redirected stdio.

    On Windows the engine reads and writes the console's OEM code page when
    redirected; elsewhere it uses UTF-8.
    """
    return "oem" if (os_name or os.name) == "nt" else "utf-8"


def build_engine_command(
    executable: str,
    *,
    hidden: bool,
    no_profile: bool = True,
    non_interactive: bool = True,
) -> list[str]:
    """Build the engine argv. The script itself is read from stdin."""
    argv = [executable]
    if no_profile:
        argv.append("-NoProfile")
    if non_interactive:
        argv.append("-NonInteractive")
    if hidden:
        argv.extend(["-WindowStyle", "Hidden"])
    argv.extend(["-Command", "-"])
    return argv


class PowerShellStrategy:
    """Run scripts in a hidden, non-interactive PowerShell session."""

    def __init__(
        self,
        executable: str = "powershell",
        *,
        hidden: bool | None = None,
        no_profile: bool = True,
        non_interactive: bool = True,
        encoding: str | None = None,
    ) -> None:
        self.executable = executable
        # -WindowStyle is rejected by pwsh outside Windows.
        self.hidden = os.name == "nt" if hidden is None else hidden
        self.no_profile = no_profile
        self.non_interactive = non_interactive
        self.encoding = encoding or default_engine_encoding()

    @property
    def kind(self) -> StrategyKind:
        return StrategyKind.ENGINE

    def executor_options(self, verbose: bool) -> ScriptOptions:
        return ScriptOptions(print_commands=verbose, encoding=self.encoding)

    def command(self, options: ScriptOptions) -> list[str]:
        return build_engine_command(
            options.runner or self.executable,
            hidden=self.hidden,
            no_profile=self.no_profile,
            non_interactive=self.non_interactive,
        )

    def run(self, script: str, options: ScriptOptions) -> SubprocessResult:
        """Run *script* in the engine.

        The engine's status is reported as 0 on success and 1 otherwise.
        """
        argv = self.command(options)
        if options.print_commands:
            logger.info("%s> %s", argv[0], script)

        try:
            payload = f"{script}\n".encode(options.encoding)
        except (UnicodeEncodeError, LookupError) as exc:
            msg = f"Could not encode script as {options.encoding}: {exc}"
            raise LaunchFailure(msg) from exc

        try:
            completed = subprocess.run(
                argv,
                input=payload,
                capture_output=True,
                cwd=options.working_directory,
                env=merged_env(options.env_vars),
                creationflags=_CREATE_NO_WINDOW,
            )
        except OSError as exc:
            msg = f"Failed to launch {argv[0]!r}: {exc}"
            raise LaunchFailure(msg) from exc

        return SubprocessResult(
            returncode=0 if completed.returncode == 0 else 1,
            stdout=decode_stream(completed.stdout, options.encoding, "stdout"),
            stderr=decode_stream(completed.stderr, options.encoding, "stderr"),
        )
