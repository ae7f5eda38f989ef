"""Platform strategy layer for scriptrun.

Public API:
- PlatformStrategy: Protocol for blocking script execution
- ProcessSpawner: Protocol for non-blocking launch
- PosixShellStrategy: Default shell runner
- PowerShellStrategy: Hosted scripting engine runner
- get_strategy: Factory returning cached strategy singletons
- remove_batch_file: Clean up after a spawned batch-file child
"""

from __future__ import annotations

from scriptrun.strategies.engine import PowerShellStrategy
from scriptrun.strategies.posix import PosixShellStrategy, remove_batch_file
from scriptrun.strategies.protocol import PlatformStrategy, ProcessSpawner
from scriptrun.strategies.registry import get_strategy, resolve_strategy_kind

__all__ = [
    "PlatformStrategy",
    "PosixShellStrategy",
    "PowerShellStrategy",
    "ProcessSpawner",
    "get_strategy",
    "remove_batch_file",
    "resolve_strategy_kind",
]
