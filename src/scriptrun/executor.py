"""Script executor.

Runs a script to completion on the configured platform strategy and returns
a normalized ``ProcessOutput``.

Design follows Function Core / Imperative Shell:
- Pure function: scriptrun.normalize.normalize
- Imperative shell: ScriptExecutor.run, run_script
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from scriptrun.normalize import normalize
from scriptrun.strategies.registry import get_strategy
from scriptrun.tracing import get_tracer, output_attributes, script_attributes

if TYPE_CHECKING:
    from scriptrun.models import ProcessOutput
    from scriptrun.strategies.protocol import PlatformStrategy

logger = logging.getLogger(__name__)


class ScriptExecutor:
    """Blocking script runner bound to one platform strategy."""

    def __init__(self, strategy: PlatformStrategy | None = None) -> None:
        self._strategy = strategy if strategy is not None else get_strategy()

    @property
    def strategy(self) -> PlatformStrategy:
        return self._strategy

    def run(self, script: str, verbose: bool = False) -> ProcessOutput:
        """Run *script* and wait for it to finish.

        A non-zero exit is reported through ``ProcessOutput.success()``, not
        raised.

        Args:
            script: Script body, passed verbatim to the strategy. The engine
                strategy needs a single line with ``;`` between statements.
            verbose: Log the script, its options and the result at INFO on
                the ``scriptrun.executor`` logger. The library installs no
                handler; callers configure logging at INFO to see the lines.

        Raises:
            LaunchFailure: If the interpreter could not be started.
            CaptureFailure: If captured output could not be decoded.
        """
        options = self._strategy.executor_options(verbose)
        if verbose:
            logger.info("Executing `%s` using %r.", script, options)

        tracer = get_tracer()
        with tracer.start_as_current_span(
            "scriptrun.run_script",
            attributes=script_attributes(script, self._strategy.kind),
        ) as span:
            raw = self._strategy.run(script, options)
            output = normalize(raw, self._strategy.kind)
            span.set_attributes(output_attributes(output))

        if verbose:
            logger.info(" %r", output)
        return output


def run_script(script: str, verbose: bool = False) -> ProcessOutput:
    """Run *script* on the default platform strategy. See ``ScriptExecutor.run``."""
    return ScriptExecutor().run(script, verbose)
