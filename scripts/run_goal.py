"""CLI for routing a single goal to an agent and streaming its workflow progress."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, AsyncIterator

from agentorch.core.config import get_settings
from agentorch.core.logging import configure_logging
from agentorch.orchestration.orchestrator import AgentOrchestrator, StreamItem
from agentorch.schemas.agents import Goal
from agentorch.schemas.progress import TextProgress
from agentorch.schemas.results import AgentRunResponse


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Route a goal to an agent and run its workflow")
    parser.add_argument("title", help="Goal title used for classification.")
    parser.add_argument("--description", default="", help="Goal description.")
    parser.add_argument(
        "--tool",
        dest="tools",
        action="append",
        default=[],
        help="Tool the goal needs; repeat for several tools.",
    )
    parser.add_argument("--agent", default=None, help="Run this agent id directly instead of classifying the goal.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for simulated latency and metrics.")
    parser.add_argument("--fast", action="store_true", help="Skip simulated waits.")
    parser.add_argument("--legacy", action="store_true", help="Print the legacy {success, data, error} payload.")
    return parser


def _settings_overrides(args: argparse.Namespace) -> dict[str, Any]:
    execution: dict[str, Any] = {}
    if args.seed is not None:
        execution["random_seed"] = args.seed
    if args.fast:
        execution["time_scale"] = 0.0
    return {"execution": execution} if execution else {}


async def _consume(stream: AsyncIterator[StreamItem]) -> AgentRunResponse:
    response: AgentRunResponse | None = None
    async for item in stream:
        if isinstance(item, AgentRunResponse):
            response = item
        elif isinstance(item, TextProgress):
            print(f"[{item.status}] {item.text}", flush=True)
        else:
            print(f"[{item.status}] {json.dumps(item.steps, default=str)}", flush=True)
    if response is None:
        raise RuntimeError("workflow stream ended without a response")
    return response


async def _run(args: argparse.Namespace) -> AgentRunResponse:
    settings = get_settings(_settings_overrides(args))
    orchestrator = AgentOrchestrator(settings=settings)
    goal = Goal(title=args.title, description=args.description, tools_needed=args.tools)
    target = args.agent or goal
    return await _consume(orchestrator.stream(target, goal if args.agent else None))


def main() -> None:
    args = _build_parser().parse_args()
    settings = get_settings()
    configure_logging(settings.observability.log_level, json_logs=settings.observability.json_logs)

    response = asyncio.run(_run(args))
    if args.legacy:
        print(json.dumps(response.to_legacy(), indent=2, default=str))
    else:
        print(response.model_dump_json(indent=2))
    if not response.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
