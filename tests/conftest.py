"""Shared test fixtures for scriptrun."""

from __future__ import annotations

import sys

import pytest

from scriptrun.models import ScriptOptions, StrategyKind
from scriptrun.strategies.registry import (
    SCRIPTRUN_ENGINE_ENV,
    SCRIPTRUN_STRATEGY_ENV,
    reset_strategy_cache,
)
from scriptrun.subprocess_result import SubprocessResult

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell")


@pytest.fixture(autouse=True)
def _isolate_strategy_config(monkeypatch: pytest.MonkeyPatch):
    """Clear strategy env overrides and the strategy cache around each test."""
    monkeypatch.delenv(SCRIPTRUN_STRATEGY_ENV, raising=False)
    monkeypatch.delenv(SCRIPTRUN_ENGINE_ENV, raising=False)
    reset_strategy_cache()
    yield
    reset_strategy_cache()


class FakeStrategy:
    """In-memory PlatformStrategy. Records calls and returns a canned result."""

    def __init__(
        self,
        result: SubprocessResult | None = None,
        *,
        kind: StrategyKind = StrategyKind.POSIX,
        error: Exception | None = None,
    ) -> None:
        self.result = result or SubprocessResult(returncode=0, stdout="", stderr="")
        self.error = error
        self.calls: list[tuple[str, ScriptOptions]] = []
        self._kind = kind

    @property
    def kind(self) -> StrategyKind:
        return self._kind

    def executor_options(self, verbose: bool) -> ScriptOptions:
        return ScriptOptions(print_commands=verbose)

    def run(self, script: str, options: ScriptOptions) -> SubprocessResult:
        self.calls.append((script, options))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def fake_strategy() -> FakeStrategy:
    """A POSIX-kind fake strategy returning ``("hello\\n", "")`` with code 0."""
    return FakeStrategy(SubprocessResult(returncode=0, stdout="hello\n", stderr=""))
