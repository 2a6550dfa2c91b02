"""Sequential workflow execution with progress reporting and cooperative cancellation."""

from __future__ import annotations

import asyncio
import inspect
import random
import time
from typing import Any, Awaitable, Callable

from ..agents.exceptions import AgentNotFoundError, ExecutionCancelledError
from ..agents.registry import AgentRegistry, get_registry
from ..core.config import Settings, get_settings
from ..core.logging import get_logger
from ..core.metrics import (
    increment_progress_notification,
    increment_workflow_step,
    mark_agent_run_finished,
    mark_agent_run_started,
)
from ..schemas.agents import AgentProfile, AgentVariant
from ..schemas.progress import ProgressSink, TextProgress
from ..schemas.results import AgentResult, AgentRunResponse
from ..services.model_config import model_config_for_variant
from .planner import WorkflowStep, plan_workflow
from .state import ExecutionRun, RunStatus, new_run
from .synthesizer import ResultSynthesizer

logger = get_logger(name=__name__)

Sleep = Callable[[float], Awaitable[Any]]

UNKNOWN_ERROR = "Unknown error"


class CancellationToken:
    """Caller-held handle used to abandon a run, optionally with a deadline.

    A token derived with :meth:`with_deadline` also fires when its parent does.
    """

    def __init__(self, *, deadline: float | None = None, parent: "CancellationToken | None" = None) -> None:
        self._reason: str | None = None
        self._deadline = deadline
        self._parent = parent

    @classmethod
    def with_timeout(cls, seconds: float) -> "CancellationToken":
        if seconds <= 0:
            raise ValueError("timeout must be positive")
        return cls(deadline=time.monotonic() + seconds)

    def with_deadline(self, seconds: float) -> "CancellationToken":
        if seconds <= 0:
            raise ValueError("timeout must be positive")
        return CancellationToken(deadline=time.monotonic() + seconds, parent=self)

    def cancel(self, reason: str = "cancelled by caller") -> None:
        if self._reason is None:
            self._reason = reason

    @property
    def deadline_passed(self) -> bool:
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return True
        return self._parent is not None and self._parent.deadline_passed

    @property
    def cancelled(self) -> bool:
        if self._reason is not None or self.deadline_passed:
            return True
        return self._parent is not None and self._parent.cancelled

    @property
    def reason(self) -> str | None:
        if self._reason is not None:
            return self._reason
        if self._parent is not None and self._parent.cancelled:
            return self._parent.reason
        if self.deadline_passed:
            return "deadline exceeded"
        return None

    def remaining(self) -> float | None:
        own = None if self._deadline is None else max(0.0, self._deadline - time.monotonic())
        inherited = None if self._parent is None else self._parent.remaining()
        if own is None:
            return inherited
        if inherited is None:
            return own
        return min(own, inherited)

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise ExecutionCancelledError(self.reason or "cancelled by caller")


class WorkflowExecutor:
    """Runs a variant's planned steps in order and resolves to an :class:`AgentRunResponse`."""

    def __init__(
        self,
        registry: AgentRegistry | None = None,
        synthesizer: ResultSynthesizer | None = None,
        settings: Settings | None = None,
        rng: random.Random | None = None,
        *,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._settings = settings or get_settings()
        self._registry = registry or get_registry()
        if rng is None:
            rng = random.Random(self._settings.execution.random_seed)
        self._rng = rng
        self._synthesizer = synthesizer or ResultSynthesizer(self._registry, self._settings, rng)
        self._sleep = sleep

    @property
    def settings(self) -> Settings:
        return self._settings

    async def execute(
        self,
        variant: AgentVariant | str,
        payload: Any = None,
        on_progress: ProgressSink | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> AgentRunResponse:
        try:
            profile = self._registry.lookup(variant)
        except AgentNotFoundError as exc:
            logger.warning("agent_not_found", agent=exc.agent_id)
            return AgentRunResponse(success=False, error=str(exc), agent=exc.agent_id, status=RunStatus.FAILED.value)

        config = self._settings.execution
        if config.run_timeout_seconds is not None:
            # The configured deadline bounds every run, including ones with a caller token.
            cancel_token = (cancel_token or CancellationToken()).with_deadline(config.run_timeout_seconds)

        run = new_run(profile.variant, payload=payload)
        run.model_version = model_config_for_variant(
            profile.variant, self._settings.model.default_complexity
        ).model_version
        metrics_enabled = self._settings.observability.prometheus_enabled
        if metrics_enabled:
            mark_agent_run_started(variant=profile.variant.value)
        logger.info(
            "agent_run_started",
            run_id=str(run.run_id),
            variant=profile.variant.value,
            model_version=run.model_version,
        )
        started = time.perf_counter()
        result: AgentResult | None = None
        try:
            result = await self._drive(run, profile, on_progress, cancel_token)
        except ExecutionCancelledError as exc:
            run.cancel(exc.reason)
            error = str(exc)
            logger.info("agent_run_cancelled", run_id=str(run.run_id), reason=exc.reason)
        except asyncio.CancelledError:
            if not run.is_terminal:
                run.cancel("task cancelled")
            self._finish(run, started, metrics_enabled)
            raise
        except Exception as exc:  # recovered at the run boundary, never retried
            message = str(exc) or UNKNOWN_ERROR
            if not run.is_terminal:
                run.fail(message)
            error = message
            logger.warning("agent_run_failed", run_id=str(run.run_id), error=message, exc_info=True)
        else:
            error = None
            logger.info("agent_run_completed", run_id=str(run.run_id), variant=profile.variant.value)
        self._finish(run, started, metrics_enabled)

        return AgentRunResponse(
            success=error is None,
            data=result if error is None else None,
            error=error,
            agent=profile.variant.value,
            run_id=run.run_id,
            status=run.status.value,
        )

    async def _drive(
        self,
        run: ExecutionRun,
        profile: AgentProfile,
        on_progress: ProgressSink | None,
        token: CancellationToken | None,
    ) -> AgentResult:
        config = self._settings.execution
        plan = plan_workflow(profile.variant)

        await self._emit(on_progress, run, f"Initializing {profile.name}...")
        await self._pause(config.init_pause_ms, token)

        run.start(len(plan))
        for index, step in enumerate(plan):
            if token is not None:
                token.raise_if_cancelled()
            run.advance(index)
            if self._settings.observability.prometheus_enabled:
                increment_workflow_step(variant=profile.variant.value)
            logger.debug("agent_step_started", run_id=str(run.run_id), step_index=index, step=step.label)
            await self._emit(on_progress, run, step.label)
            await self._pause(self._step_delay_ms(step), token)
            if self._rng.random() < config.processing_notice_probability:
                await self._emit(on_progress, run, f"{step.label} - Processing...")
                await self._pause(config.processing_pause_ms, token)

        result = self._synthesizer.synthesize(profile.variant, run.payload)
        await self._emit(on_progress, run, f"{profile.name} completed successfully", final=True)
        run.complete()
        return result

    def _step_delay_ms(self, step: WorkflowStep) -> float:
        config = self._settings.execution
        cap = min(max(step.duration_ms, config.step_delay_min_ms), config.step_delay_max_ms)
        return self._rng.uniform(config.step_delay_min_ms, cap)

    async def _pause(self, milliseconds: float, token: CancellationToken | None) -> None:
        seconds = milliseconds * self._settings.execution.time_scale / 1000.0
        if token is not None:
            token.raise_if_cancelled()
            remaining = token.remaining()
            if remaining is not None:
                seconds = min(seconds, remaining)
        await self._sleep(seconds)
        if token is not None:
            token.raise_if_cancelled()

    async def _emit(
        self,
        sink: ProgressSink | None,
        run: ExecutionRun,
        text: str,
        *,
        final: bool = False,
    ) -> None:
        if sink is None:
            return
        update = TextProgress(
            text=text,
            run_id=run.run_id,
            agent=run.variant.value,
            step_index=None if final or run.step_index < 0 else run.step_index,
            status=RunStatus.COMPLETED.value if final else run.status.value,
        )
        outcome = sink(update)
        if inspect.isawaitable(outcome):
            await outcome
        if self._settings.observability.prometheus_enabled:
            increment_progress_notification(kind=update.kind)

    def _finish(self, run: ExecutionRun, started: float, metrics_enabled: bool) -> None:
        latency = time.perf_counter() - started
        if metrics_enabled:
            mark_agent_run_finished(variant=run.variant.value, status=run.status.value, latency=latency)
        logger.info(
            "agent_run_finished",
            run_id=str(run.run_id),
            variant=run.variant.value,
            status=run.status.value,
            steps_completed=run.step_index + 1,
            latency=latency,
            error=run.error,
        )
