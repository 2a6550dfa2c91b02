from __future__ import annotations

import asyncio
import random
from typing import Any, Callable

from agentorch.core.config import Settings, get_settings
from agentorch.orchestration.executor import WorkflowExecutor
from agentorch.orchestration.orchestrator import AgentOrchestrator
from agentorch.orchestration.synthesizer import ResultSynthesizer
from agentorch.schemas.progress import TextProgress


def fast_settings(**execution: Any) -> Settings:
    """Settings with simulated waits disabled; keyword arguments override execution values."""
    values: dict[str, Any] = {"time_scale": 0.0}
    values.update(execution)
    return get_settings({"environment": "test", "execution": values})


class RecordingSink:
    """Async progress sink that keeps every update it receives."""

    def __init__(self, *, fail_on: str | None = None, error: Exception | None = None) -> None:
        self.updates: list[Any] = []
        self._fail_on = fail_on
        self._error = error

    async def __call__(self, update: Any) -> None:
        if self._fail_on is not None and isinstance(update, TextProgress) and update.text == self._fail_on:
            raise self._error or RuntimeError(f"sink rejected {update.text!r}")
        self.updates.append(update)

    @property
    def texts(self) -> list[str]:
        return [update.text for update in self.updates if isinstance(update, TextProgress)]


class RecordingSleep:
    """Stand-in for ``asyncio.sleep`` that records requested delays without waiting."""

    def __init__(self, *, on_call: Callable[[int], None] | None = None) -> None:
        self.calls: list[float] = []
        self._on_call = on_call

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self._on_call is not None:
            self._on_call(len(self.calls))
        await asyncio.sleep(0)


class FailingSynthesizer(ResultSynthesizer):
    def __init__(self, error: Exception) -> None:
        super().__init__()
        self._error = error

    def synthesize(self, variant: Any, payload: Any = None) -> Any:
        raise self._error


def build_executor(
    *,
    seed: int = 7,
    settings: Settings | None = None,
    sleep: Any = None,
    synthesizer: ResultSynthesizer | None = None,
) -> WorkflowExecutor:
    settings = settings or fast_settings()
    rng = random.Random(seed)
    return WorkflowExecutor(
        settings=settings,
        rng=rng,
        synthesizer=synthesizer or ResultSynthesizer(settings=settings, rng=rng),
        sleep=sleep or RecordingSleep(),
    )


def build_orchestrator(*, seed: int = 7, settings: Settings | None = None) -> AgentOrchestrator:
    executor = build_executor(seed=seed, settings=settings)
    return AgentOrchestrator(executor=executor)
