"""PlatformStrategy protocol definition."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import subprocess

    from scriptrun.models import ScriptOptions, StrategyKind
    from scriptrun.subprocess_result import SubprocessResult


@runtime_checkable
class PlatformStrategy(Protocol):
    """Protocol for script execution substrates.

    Each strategy wraps one way of running a script (a POSIX shell, a
    hosted scripting engine) behind a common blocking interface.
    """

    @property
    def kind(self) -> StrategyKind:
        """Which success rule applies to results from this strategy."""
        ...

    def executor_options(self, verbose: bool) -> ScriptOptions:
        """Options the executor uses for a blocking run."""
        ...

    def run(self, script: str, options: ScriptOptions) -> SubprocessResult:
        """Run *script* to completion and return its raw result.

        Raises ``LaunchFailure`` or ``CaptureFailure``; never raises for a
        non-zero exit.
        """
        ...


@runtime_checkable
class ProcessSpawner(Protocol):
    """Protocol for strategies that can launch a script without waiting."""

    def spawn(self, script: str, options: ScriptOptions) -> subprocess.Popen[bytes]:
        """Launch *script* and return the live child handle."""
        ...
