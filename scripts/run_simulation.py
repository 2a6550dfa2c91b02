"""CLI for running concurrent goal-routing scenarios through the simulation harness."""

from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path
from typing import Any

from agentorch.core.config import get_settings
from agentorch.core.logging import configure_logging
from agentorch.orchestration.orchestrator import AgentOrchestrator
from agentorch.orchestration.simulation import SimulationHarness, SimulationScenario, summarize_reports

_DEFAULT_GOALS: list[dict[str, Any]] = [
    {"title": "Cold outreach to new prospects", "tools_needed": ["linkedin"]},
    {"title": "Quarterly newsletter", "description": "Monthly drip for customers"},
    {"title": "Book demo meeting", "tools_needed": ["calendar"]},
    {"title": "Pipeline insight review", "description": "Weekly analytics digest"},
    {"title": "Launch blog series"},
    {"title": "Automate lead handoff", "tools_needed": ["workflow"]},
    {"title": "Unknown gibberish zzz"},
]


def _load_scenarios(path: Path | None, *, repetitions: int, concurrency: int) -> list[SimulationScenario]:
    if path is None:
        return [
            SimulationScenario(
                name="mixed-goal-demo",
                goals=_DEFAULT_GOALS,
                repetitions=repetitions,
                concurrency=concurrency,
                notes="One goal per classification rule plus the fallback.",
            )
        ]

    payload = json.loads(path.read_text(encoding="utf-8"))
    scenarios: list[SimulationScenario] = []
    for item in payload:
        if not isinstance(item, dict):
            raise ValueError("Scenario configuration must be a list of objects")
        scenarios.append(
            SimulationScenario(
                name=item.get("name", "scenario"),
                goals=item.get("goals", []),
                payload=item.get("payload"),
                repetitions=item.get("repetitions", repetitions),
                concurrency=item.get("concurrency", concurrency),
                notes=item.get("notes"),
            )
        )
    return scenarios


async def _run_benchmark(orchestrator: AgentOrchestrator, scenarios: list[SimulationScenario]) -> dict[str, Any]:
    harness = SimulationHarness(orchestrator)
    reports = [await harness.run(scenario) for scenario in scenarios]

    aggregated = summarize_reports(reports)
    aggregated["scenario_count"] = len(reports)
    aggregated["scenarios"] = [
        {
            "name": report.scenario.name,
            "success_rate": report.success_rate,
            "average_latency": report.average_latency,
        }
        for report in reports
    ]
    return aggregated


def main() -> None:
    parser = argparse.ArgumentParser(description="Run goal-routing simulation scenarios")
    parser.add_argument(
        "--scenarios",
        type=Path,
        default=None,
        help="Path to a JSON file containing simulation scenario definitions.",
    )
    parser.add_argument("--repetitions", type=int, default=3, help="Number of repetitions per goal.")
    parser.add_argument("--concurrency", type=int, default=4, help="Concurrent runs per scenario.")
    parser.add_argument("--time-scale", type=float, default=0.0, help="Multiplier for simulated waits.")
    args = parser.parse_args()

    base = get_settings()
    configure_logging(base.observability.log_level, json_logs=base.observability.json_logs)
    settings = get_settings({"execution": {"time_scale": args.time_scale}})
    scenarios = _load_scenarios(args.scenarios, repetitions=args.repetitions, concurrency=args.concurrency)
    results = asyncio.run(_run_benchmark(AgentOrchestrator(settings=settings), scenarios))

    print("Goal Routing Simulation Results")
    scenario_details = results.pop("scenarios", [])
    for key, value in results.items():
        print(f"- {key.replace('_', ' ').title()}: {value}")
    if scenario_details:
        print("\nScenario Breakdown")
        for detail in scenario_details:
            print(
                f"  - {detail['name']}: success_rate={detail['success_rate']:.2f}, "
                f"avg_latency={detail['average_latency']:.2f}s"
            )


if __name__ == "__main__":
    main()
