from __future__ import annotations


class OrchestrationError(RuntimeError):
    """Base class for orchestration failures."""


class AgentNotFoundError(OrchestrationError, LookupError):
    """Raised when a variant id is absent from the agent registry."""

    def __init__(self, agent_id: str) -> None:
        self.agent_id = agent_id
        super().__init__(f"Agent {agent_id} not found")


class ExecutionCancelledError(OrchestrationError):
    """Raised when a run is abandoned through its cancellation token or deadline."""

    def __init__(self, reason: str = "cancelled by caller") -> None:
        self.reason = reason
        super().__init__(f"Execution cancelled: {reason}")


class InvalidRunTransitionError(OrchestrationError):
    """Raised when an execution run is moved backwards or out of a terminal state."""
