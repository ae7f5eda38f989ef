"""Cross-platform script execution.

Public API:
- run_script: Run a script to completion and capture normalized output
- spawn_script: Launch a script without waiting
- remove_batch_file: Delete the batch file of a finished spawned child
- ScriptExecutor / ScriptSpawner: Injectable variants of the above
- ProcessOutput: Normalized (code, stdout, stderr) result
- ScriptOptions, IoMode, StrategyKind: Launcher configuration
- ScriptRunError, LaunchFailure, CaptureFailure: Error taxonomy
"""

from __future__ import annotations

from scriptrun.errors import CaptureFailure, LaunchFailure, ScriptRunError
from scriptrun.executor import ScriptExecutor, run_script
from scriptrun.models import IoMode, ProcessOutput, ScriptOptions, StrategyKind, spawn_options
from scriptrun.spawner import ScriptSpawner, spawn_script
from scriptrun.strategies import (
    PlatformStrategy,
    PosixShellStrategy,
    PowerShellStrategy,
    get_strategy,
    remove_batch_file,
)

__all__ = [
    "CaptureFailure",
    "IoMode",
    "LaunchFailure",
    "PlatformStrategy",
    "PosixShellStrategy",
    "PowerShellStrategy",
    "ProcessOutput",
    "ScriptExecutor",
    "ScriptOptions",
    "ScriptRunError",
    "ScriptSpawner",
    "StrategyKind",
    "get_strategy",
    "remove_batch_file",
    "run_script",
    "spawn_options",
    "spawn_script",
]
