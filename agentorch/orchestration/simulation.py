from __future__ import annotations

import asyncio
import inspect
import time
from collections import Counter
from copy import deepcopy
from dataclasses import dataclass, field
from statistics import mean
from typing import Any, Iterable, Sequence

from ..core.logging import get_logger
from ..schemas.progress import ProgressSink
from .orchestrator import AgentOrchestrator, GoalOrAgent

logger = get_logger(name=__name__)


@dataclass(slots=True)
class SimulationScenario:
    """Synthetic workload used to drive many concurrent orchestration calls."""

    name: str
    goals: Sequence[GoalOrAgent]
    payload: Any = None
    repetitions: int = 1
    concurrency: int = 1
    notes: str | None = None


@dataclass(slots=True)
class SimulationRunResult:
    goal_index: int
    agent: str | None
    status: str
    success: bool
    latency_seconds: float
    error: str | None = None
    progress_events: int = 0

    def as_dict(self) -> dict[str, Any]:
        return {
            "goal_index": self.goal_index,
            "agent": self.agent,
            "status": self.status,
            "success": self.success,
            "latency_seconds": self.latency_seconds,
            "error": self.error,
            "progress_events": self.progress_events,
        }


@dataclass(slots=True)
class SimulationReport:
    scenario: SimulationScenario
    runs: list[SimulationRunResult] = field(default_factory=list)

    @property
    def success_rate(self) -> float:
        if not self.runs:
            return 0.0
        return sum(1 for run in self.runs if run.success) / len(self.runs)

    @property
    def average_latency(self) -> float:
        if not self.runs:
            return 0.0
        return mean(run.latency_seconds for run in self.runs)

    def variant_distribution(self) -> dict[str, int]:
        return dict(Counter(run.agent or "unknown" for run in self.runs))

    def to_timeseries_payload(self) -> list[dict[str, Any]]:
        return [run.as_dict() for run in self.runs]


class SimulationHarness:
    """Runs orchestrator simulations for synthetic scenarios."""

    def __init__(self, orchestrator: AgentOrchestrator, *, progress_callback: ProgressSink | None = None) -> None:
        self._orchestrator = orchestrator
        self._progress_callback = progress_callback

    async def run(self, scenario: SimulationScenario) -> SimulationReport:
        jobs = self._expand(scenario)
        semaphore = asyncio.Semaphore(max(1, scenario.concurrency))
        runs: list[SimulationRunResult] = []

        async def execute(index: int, goal: GoalOrAgent) -> None:
            async with semaphore:
                runs.append(await self._run_single(index, goal, scenario.payload))

        await asyncio.gather(*(execute(index, goal) for index, goal in jobs))
        report = SimulationReport(scenario=scenario, runs=runs)
        logger.info(
            "simulation_completed",
            scenario=scenario.name,
            runs=len(runs),
            success_rate=report.success_rate,
        )
        return report

    def _expand(self, scenario: SimulationScenario) -> list[tuple[int, GoalOrAgent]]:
        jobs: list[tuple[int, GoalOrAgent]] = []
        for index, goal in enumerate(scenario.goals):
            for _ in range(max(1, scenario.repetitions)):
                jobs.append((index, deepcopy(goal)))
        return jobs

    async def _run_single(self, index: int, goal: GoalOrAgent, payload: Any) -> SimulationRunResult:
        events = 0

        async def count(update: Any) -> None:
            nonlocal events
            events += 1
            if self._progress_callback is not None:
                outcome = self._progress_callback(update)
                if inspect.isawaitable(outcome):
                    await outcome

        start = time.perf_counter()
        response = await self._orchestrator.run(goal, deepcopy(payload), count)
        latency = time.perf_counter() - start
        return SimulationRunResult(
            goal_index=index,
            agent=response.agent,
            status=response.status or "unknown",
            success=response.success,
            latency_seconds=latency,
            error=response.error,
            progress_events=events,
        )


def summarize_reports(reports: Iterable[SimulationReport]) -> dict[str, Any]:
    reports_list = list(reports)
    if not reports_list:
        return {"total_runs": 0, "success_rate": 0.0, "average_latency": 0.0, "variants": {}}
    all_runs = [run for report in reports_list for run in report.runs]
    total_runs = len(all_runs)
    variants: Counter[str] = Counter()
    for report in reports_list:
        variants.update(report.variant_distribution())
    return {
        "total_runs": total_runs,
        "success_rate": sum(1 for run in all_runs if run.success) / total_runs if total_runs else 0.0,
        "average_latency": mean(run.latency_seconds for run in all_runs) if total_runs else 0.0,
        "variants": dict(variants),
    }
