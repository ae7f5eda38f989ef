"""Core data models for scriptrun."""

from __future__ import annotations

import sys
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class StrategyKind(StrEnum):
    """Which execution substrate runs a script."""

    POSIX = "posix"
    ENGINE = "engine"


class IoMode(StrEnum):
    """How a child process stream is wired."""

    INHERIT = "inherit"
    PIPE = "pipe"
    NULL = "null"


class ScriptOptions(BaseModel):
    """Launcher configuration for a single script invocation."""

    model_config = ConfigDict(frozen=True)

    runner: str | None = Field(
        default=None,
        description="Interpreter override. None selects the platform default.",
    )
    runner_args: list[str] = Field(
        default_factory=list,
        description="Interpreter arguments placed before the script body.",
    )
    working_directory: Path | None = None
    env_vars: dict[str, str] | None = Field(
        default=None,
        description="Variables merged over the inherited environment.",
    )
    input_redirection: IoMode = IoMode.INHERIT
    output_redirection: IoMode = IoMode.PIPE
    exit_on_error: bool = False
    print_commands: bool = False
    encoding: str = "utf-8"


def _active_strategy_kind() -> StrategyKind:
    from scriptrun.strategies.registry import resolve_strategy_kind

    return resolve_strategy_kind()


def spawn_options(platform: str | None = None) -> ScriptOptions:
    """Return the fixed configuration used by the spawner.

    Linux forces ``bash`` so spawned scripts see one syntax; every other
    platform keeps its default runner.
    """
    platform = platform or sys.platform
    return ScriptOptions(
        runner="bash" if platform.startswith("linux") else None,
        input_redirection=IoMode.INHERIT,
        output_redirection=IoMode.INHERIT,
        exit_on_error=True,
        print_commands=True,
    )


class ProcessOutput(BaseModel):
    """Normalized result of a completed script.

    Serializes as ``{"code", "stdout", "stderr"}``. ``strategy`` only decides
    how ``success()`` is evaluated. It is not serialized: when unset, as when
    a record is read back from JSON, it resolves to the active platform
    strategy (``SCRIPTRUN_STRATEGY``, then the platform default).
    """

    model_config = ConfigDict(frozen=True)

    code: int
    stdout: str
    stderr: str
    strategy: StrategyKind = Field(
        default_factory=_active_strategy_kind, exclude=True, repr=False
    )

    def success(self) -> bool:
        from scriptrun.normalize import is_success

        return is_success(self.code, self.stderr, self.strategy)

    def __str__(self) -> str:
        from scriptrun.normalize import format_output

        return format_output(self)
