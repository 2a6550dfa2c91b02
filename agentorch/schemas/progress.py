from __future__ import annotations

import inspect
from typing import Annotated, Any, Awaitable, Callable, Literal, Union
from uuid import UUID

from pydantic import BaseModel, Field, TypeAdapter


class _ProgressBase(BaseModel):
    run_id: UUID | None = None
    agent: str | None = None
    step_index: int | None = Field(default=None, ge=0, description="Index of the planned step, if any.")
    status: str | None = None


class TextProgress(_ProgressBase):
    """A named step or a status message."""

    kind: Literal["text"] = "text"
    text: str

    def as_legacy(self) -> str:
        return self.text


class StepsProgress(_ProgressBase):
    """Structured step list, kept for callers that render whole step tables."""

    kind: Literal["steps"] = "steps"
    steps: list[Any] = Field(default_factory=list)

    def as_legacy(self) -> list[Any]:
        return list(self.steps)


ProgressUpdate = Annotated[Union[TextProgress, StepsProgress], Field(discriminator="kind")]

PROGRESS_ADAPTER: TypeAdapter[ProgressUpdate] = TypeAdapter(ProgressUpdate)

ProgressSink = Callable[[Any], Union[None, Awaitable[None]]]


def parse_progress(payload: Any) -> TextProgress | StepsProgress:
    """Coerce a raw payload (legacy string/list or a dict) into a typed progress update."""
    if isinstance(payload, (TextProgress, StepsProgress)):
        return payload
    if isinstance(payload, str):
        return TextProgress(text=payload)
    if isinstance(payload, (list, tuple)):
        return StepsProgress(steps=list(payload))
    return PROGRESS_ADAPTER.validate_python(payload)


def legacy_progress_sink(callback: Callable[[Any], Any]) -> ProgressSink:
    """Adapt a callback taking ``str | list`` to the typed progress sink signature."""

    async def _sink(update: TextProgress | StepsProgress) -> None:
        outcome = callback(update.as_legacy())
        if inspect.isawaitable(outcome):
            await outcome

    return _sink
