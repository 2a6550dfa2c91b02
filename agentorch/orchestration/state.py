from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from ..agents.exceptions import InvalidRunTransitionError
from ..schemas.agents import AgentVariant


class RunStatus(str, Enum):
    INITIALIZING = "initializing"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.CANCELLED})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExecutionRun(BaseModel):
    """State of one orchestration call, owned by the executor until the call resolves."""

    run_id: UUID = Field(default_factory=uuid4)
    variant: AgentVariant
    payload: Any = None
    status: RunStatus = Field(default=RunStatus.INITIALIZING)
    step_index: int = Field(default=-1, ge=-1)
    total_steps: int = Field(default=0, ge=0)
    error: str | None = None
    model_version: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def start(self, total_steps: int) -> None:
        self._require_status(RunStatus.INITIALIZING)
        self.total_steps = total_steps
        self.status = RunStatus.RUNNING
        self._touch()

    def advance(self, index: int) -> None:
        self._require_status(RunStatus.RUNNING)
        if index <= self.step_index:
            raise InvalidRunTransitionError(
                f"Step index must increase (current={self.step_index}, requested={index})"
            )
        if index >= self.total_steps:
            raise InvalidRunTransitionError(f"Step index {index} outside plan of {self.total_steps} steps")
        self.step_index = index
        self._touch()

    def complete(self) -> None:
        self._require_status(RunStatus.RUNNING)
        self.status = RunStatus.COMPLETED
        self._touch()

    def fail(self, message: str) -> None:
        self._require_open()
        self.status = RunStatus.FAILED
        self.error = message
        self._touch()

    def cancel(self, reason: str) -> None:
        self._require_open()
        self.status = RunStatus.CANCELLED
        self.error = reason
        self._touch()

    def _require_status(self, expected: RunStatus) -> None:
        if self.status is not expected:
            raise InvalidRunTransitionError(f"Run is {self.status.value}, expected {expected.value}")

    def _require_open(self) -> None:
        if self.is_terminal:
            raise InvalidRunTransitionError(f"Run already {self.status.value}")

    def _touch(self) -> None:
        self.updated_at = _utcnow()


def new_run(variant: AgentVariant, *, payload: Any = None) -> ExecutionRun:
    return ExecutionRun(variant=variant, payload=payload)
