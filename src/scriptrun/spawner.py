"""Script spawner.

Launches a script without waiting for it. The child inherits the caller's
stdio and environment, exits on the first failing command and echoes each
command. Waiting on the handle and reading its status is the caller's job.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from scriptrun.models import spawn_options
from scriptrun.strategies.posix import PosixShellStrategy
from scriptrun.tracing import get_tracer, spawn_attributes

if TYPE_CHECKING:
    import subprocess

    from scriptrun.models import ScriptOptions
    from scriptrun.strategies.protocol import ProcessSpawner

logger = logging.getLogger(__name__)


class ScriptSpawner:
    """Non-blocking script launcher. Always uses the POSIX shell family."""

    def __init__(
        self,
        strategy: ProcessSpawner | None = None,
        options: ScriptOptions | None = None,
    ) -> None:
        self._strategy = strategy if strategy is not None else PosixShellStrategy()
        self._options = options if options is not None else spawn_options()

    @property
    def options(self) -> ScriptOptions:
        return self._options

    def spawn(self, script: str) -> subprocess.Popen[bytes]:
        """Launch *script* and return the live child handle.

        Raises:
            LaunchFailure: If the interpreter could not be started. A script
                that later exits non-zero is not a launch failure.
        """
        with get_tracer().start_as_current_span("scriptrun.spawn_script") as span:
            child = self._strategy.spawn(script, self._options)
            span.set_attributes(spawn_attributes(child.pid, self._options.runner))

        logger.debug("Spawned script as pid %d", child.pid)
        return child


def spawn_script(script: str) -> subprocess.Popen[bytes]:
    """Launch *script* with the fixed spawn configuration. See ``ScriptSpawner.spawn``.

    On Windows the script runs from a temporary batch file that outlives the
    call; pass the child to ``remove_batch_file`` once it has exited.
    """
    return ScriptSpawner().spawn(script)
