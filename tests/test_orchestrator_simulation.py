from __future__ import annotations

import pytest

from agentorch.orchestration.simulation import (
    SimulationHarness,
    SimulationReport,
    SimulationRunResult,
    SimulationScenario,
    summarize_reports,
)
from tests.helpers.stubs import build_orchestrator


@pytest.mark.asyncio
async def test_simulation_harness_produces_successful_report() -> None:
    scenario = SimulationScenario(
        name="unit-test",
        goals=[{"title": "Cold outreach"}, {"title": "Do something"}, "ghost"],
        repetitions=2,
        concurrency=3,
    )
    seen: list[object] = []
    harness = SimulationHarness(build_orchestrator(), progress_callback=seen.append)

    report = await harness.run(scenario)

    assert len(report.runs) == 6
    assert report.success_rate == pytest.approx(4 / 6)
    assert report.average_latency >= 0
    assert report.variant_distribution() == {"sdr": 2, "execution": 2, "ghost": 2}
    failed = [run for run in report.runs if not run.success]
    assert {run.error for run in failed} == {"Agent ghost not found"}
    assert all(run.progress_events == 0 for run in failed)
    assert len(seen) == sum(run.progress_events for run in report.runs)


@pytest.mark.asyncio
async def test_scenario_payload_reaches_every_run() -> None:
    scenario = SimulationScenario(
        name="payload",
        goals=["email"],
        payload={"contacts": [{"id": 1}]},
        repetitions=3,
    )

    report = await SimulationHarness(build_orchestrator()).run(scenario)

    assert report.success_rate == pytest.approx(1.0)
    assert [entry["status"] for entry in report.to_timeseries_payload()] == ["completed"] * 3


def test_summarize_reports_handles_multiple_batches() -> None:
    scenario = SimulationScenario(name="rollup", goals=["sdr"])
    ok = SimulationRunResult(goal_index=0, agent="sdr", status="completed", success=True, latency_seconds=0.1)
    failed = SimulationRunResult(
        goal_index=0,
        agent="sdr",
        status="cancelled",
        success=False,
        latency_seconds=0.3,
        error="Execution cancelled: stop",
    )
    reports = [SimulationReport(scenario=scenario, runs=[ok]), SimulationReport(scenario=scenario, runs=[failed])]

    summary = summarize_reports(reports)

    assert summary["total_runs"] == 2
    assert summary["success_rate"] == pytest.approx(0.5)
    assert summary["average_latency"] == pytest.approx(0.2)
    assert summary["variants"] == {"sdr": 2}


def test_summarize_reports_without_reports() -> None:
    assert summarize_reports([])["total_runs"] == 0
