"""Strategy registry and startup-time strategy selection."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from scriptrun.models import StrategyKind

if TYPE_CHECKING:
    from scriptrun.strategies.protocol import PlatformStrategy

SCRIPTRUN_STRATEGY_ENV = "SCRIPTRUN_STRATEGY"
SCRIPTRUN_ENGINE_ENV = "SCRIPTRUN_ENGINE"

_strategy_cache: dict[StrategyKind, PlatformStrategy] = {}


def default_strategy_kind(os_name: str | None = None) -> StrategyKind:
    """Return the strategy native to the platform: the engine on Windows, POSIX elsewhere."""
    if (os_name or os.name) == "nt":
        return StrategyKind.ENGINE
    return StrategyKind.POSIX


def resolve_strategy_kind(kind: StrategyKind | str | None = None) -> StrategyKind:
    """Determine the strategy kind.

    Resolution order:

    1. Explicit *kind* parameter.
    2. ``SCRIPTRUN_STRATEGY`` environment variable.
    3. The platform default.

    Raises:
        ValueError: If the environment variable contains an unrecognised value.
    """
    if kind is not None:
        return StrategyKind(kind)

    env_value = os.environ.get(SCRIPTRUN_STRATEGY_ENV)
    if env_value:
        try:
            return StrategyKind(env_value)
        except ValueError:
            valid = ", ".join(k.value for k in StrategyKind)
            msg = f"Invalid {SCRIPTRUN_STRATEGY_ENV} value {env_value!r}. Valid options: {valid}"
            raise ValueError(msg) from None

    return default_strategy_kind()


def resolve_engine_executable(os_name: str | None = None) -> str:
    """Return the engine executable.

    ``SCRIPTRUN_ENGINE`` wins; otherwise ``powershell`` on Windows and ``pwsh``
    elsewhere.
    """
    env_value = os.environ.get(SCRIPTRUN_ENGINE_ENV)
    if env_value:
        return env_value
    return "powershell" if (os_name or os.name) == "nt" else "pwsh"


def get_strategy(kind: StrategyKind | str | None = None) -> PlatformStrategy:
    """Return a cached strategy instance for *kind*.

    Strategies hold no per-call state, so one instance per kind is shared.
    """
    resolved = resolve_strategy_kind(kind)

    if resolved in _strategy_cache:
        return _strategy_cache[resolved]

    if resolved is StrategyKind.ENGINE:
        from scriptrun.strategies.engine import PowerShellStrategy

        instance: PlatformStrategy = PowerShellStrategy(resolve_engine_executable())
    else:
        from scriptrun.strategies.posix import PosixShellStrategy

        instance = PosixShellStrategy()

    _strategy_cache[resolved] = instance
    return instance


def reset_strategy_cache() -> None:
    """Clear the strategy cache. Intended for testing."""
    _strategy_cache.clear()
