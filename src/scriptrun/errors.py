"""Exception hierarchy for scriptrun.

A script that runs and exits non-zero is not an error: it yields a
``ProcessOutput`` whose ``success()`` is False. These exceptions cover the
mechanism itself failing.
"""

from __future__ import annotations


class ScriptRunError(Exception):
    """Base exception for all scriptrun operations."""


class LaunchFailure(ScriptRunError):
    """The interpreter, shell or engine could not be started."""


class CaptureFailure(ScriptRunError):
    """A captured output stream could not be turned into text."""
