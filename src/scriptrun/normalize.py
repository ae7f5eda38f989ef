"""Result normalization.

Pure functions applied once per execution: trim the captured streams, decide
success for the strategy that ran the script, and format the display triple.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scriptrun.models import ProcessOutput, StrategyKind

if TYPE_CHECKING:
    from scriptrun.subprocess_result import SubprocessResult


def trim_trailing(text: str) -> str:
    """Strip trailing whitespace and newlines. Leading and interior text is kept."""
    return text.rstrip()


def is_success(code: int, stderr: str, strategy: StrategyKind) -> bool:
    """Decide whether a finished script succeeded.

    The engine can exit 0 while reporting an error on its error stream, so
    for it any stderr output also counts as failure.
    """
    if strategy is StrategyKind.ENGINE:
        return code == 0 and not stderr
    return code == 0


def normalize(raw: SubprocessResult, strategy: StrategyKind) -> ProcessOutput:
    """Convert a raw subprocess result into a ``ProcessOutput``."""
    return ProcessOutput(
        code=raw.returncode,
        stdout=trim_trailing(raw.stdout),
        stderr=trim_trailing(raw.stderr),
        strategy=strategy,
    )


def format_output(output: ProcessOutput) -> str:
    """Format as ``<code, stdout, stderr>``."""
    return f"<{output.code}, {output.stdout}, {output.stderr}>"
