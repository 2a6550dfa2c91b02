from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Mapping
from functools import lru_cache
from typing import Any, AsyncIterator, Union

from ..agents.registry import AgentRegistry, get_registry
from ..core.config import Settings, get_settings
from ..core.logging import get_logger
from ..schemas.agents import AgentVariant, Goal
from ..schemas.progress import ProgressSink, ProgressUpdate, legacy_progress_sink
from ..schemas.results import AgentRunResponse
from .classifier import classify_goal, coerce_goal
from .executor import UNKNOWN_ERROR, CancellationToken, WorkflowExecutor

logger = get_logger(name=__name__)

GoalOrAgent = Union[Goal, Mapping[str, Any], AgentVariant, str]
StreamItem = Union[ProgressUpdate, AgentRunResponse]

STREAM_BUFFER_SIZE = 32


class AgentOrchestrator:
    """Entry point: classify a goal (or take an agent id), run its workflow, return the outcome."""

    def __init__(
        self,
        registry: AgentRegistry | None = None,
        executor: WorkflowExecutor | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or (executor.settings if executor is not None else get_settings())
        self._registry = registry or get_registry()
        self._executor = executor or WorkflowExecutor(self._registry, settings=self._settings)

    def resolve_variant(self, goal_or_agent_id: GoalOrAgent) -> AgentVariant | str:
        if isinstance(goal_or_agent_id, AgentVariant):
            return goal_or_agent_id
        if isinstance(goal_or_agent_id, str):
            # Unknown ids are passed through so the executor reports them as not found.
            profile = self._registry.get(goal_or_agent_id)
            return profile.variant if profile is not None else goal_or_agent_id
        return classify_goal(goal_or_agent_id, self._settings)

    async def run(
        self,
        goal_or_agent_id: GoalOrAgent,
        payload: Any = None,
        on_progress: ProgressSink | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> AgentRunResponse:
        variant = self.resolve_variant(goal_or_agent_id)
        if payload is None and isinstance(goal_or_agent_id, (Goal, Mapping)):
            payload = coerce_goal(goal_or_agent_id)
        logger.debug("agent_workflow_requested", variant=getattr(variant, "value", variant))
        return await self._executor.execute(variant, payload, on_progress, cancel_token=cancel_token)

    async def stream(
        self,
        goal_or_agent_id: GoalOrAgent,
        payload: Any = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> AsyncIterator[StreamItem]:
        """Yield progress updates in order, then the final response.

        The queue is bounded, so a slow consumer holds the run at its next notification.
        Closing the iterator before the response arrives cancels the run.
        """
        token = cancel_token or CancellationToken()
        queue: asyncio.Queue[StreamItem] = asyncio.Queue(maxsize=STREAM_BUFFER_SIZE)

        async def produce() -> None:
            try:
                response = await self.run(goal_or_agent_id, payload, queue.put, cancel_token=token)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.warning("agent_stream_error", error=str(exc), exc_info=True)
                response = AgentRunResponse(success=False, error=str(exc) or UNKNOWN_ERROR, status="failed")
            await queue.put(response)

        producer = asyncio.create_task(produce())
        try:
            while True:
                item = await queue.get()
                yield item
                if isinstance(item, AgentRunResponse):
                    break
            await producer
        finally:
            if not producer.done():
                token.cancel("stream closed")
                producer.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await producer


@lru_cache(maxsize=1)
def get_orchestrator() -> AgentOrchestrator:
    return AgentOrchestrator(settings=get_settings())


async def run_agent_workflow(
    goal_or_agent_id: GoalOrAgent,
    payload: Any = None,
    on_progress: ProgressSink | None = None,
    *,
    legacy_progress: bool = False,
    cancel_token: CancellationToken | None = None,
    orchestrator: AgentOrchestrator | None = None,
) -> AgentRunResponse:
    """Run one agent workflow. ``legacy_progress`` delivers plain strings/lists to ``on_progress``."""
    if on_progress is not None and legacy_progress:
        on_progress = legacy_progress_sink(on_progress)
    target = orchestrator or get_orchestrator()
    return await target.run(goal_or_agent_id, payload, on_progress, cancel_token=cancel_token)


def stream_agent_workflow(
    goal_or_agent_id: GoalOrAgent,
    payload: Any = None,
    *,
    cancel_token: CancellationToken | None = None,
    orchestrator: AgentOrchestrator | None = None,
) -> AsyncIterator[StreamItem]:
    target = orchestrator or get_orchestrator()
    return target.stream(goal_or_agent_id, payload, cancel_token=cancel_token)
