"""Agent orchestration engine: goal routing, step-sequenced workflows and typed results."""

from .agents.exceptions import AgentNotFoundError, ExecutionCancelledError, OrchestrationError
from .orchestration import (
    AgentOrchestrator,
    CancellationToken,
    classify_goal,
    plan_workflow,
    run_agent_workflow,
    stream_agent_workflow,
)
from .schemas.agents import AgentVariant, Goal
from .schemas.results import AgentResult, AgentRunResponse

__version__ = "0.1.0"

__all__ = [
    "AgentNotFoundError",
    "AgentOrchestrator",
    "AgentResult",
    "AgentRunResponse",
    "AgentVariant",
    "CancellationToken",
    "ExecutionCancelledError",
    "Goal",
    "OrchestrationError",
    "classify_goal",
    "plan_workflow",
    "run_agent_workflow",
    "stream_agent_workflow",
]
