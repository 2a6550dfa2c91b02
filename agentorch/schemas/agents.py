from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class AgentVariant(str, Enum):
    PLANNING = "planning"
    RESEARCH = "research"
    CONTENT = "content"
    EXECUTION = "execution"
    SDR = "sdr"
    EMAIL = "email"
    CALENDAR = "calendar"
    ANALYSIS = "analysis"
    AUTOMATION = "automation"


class AgentProfile(BaseModel):
    """Immutable catalog entry describing one agent variant."""

    model_config = ConfigDict(frozen=True)

    variant: AgentVariant
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    capabilities: frozenset[str] = Field(default_factory=frozenset)
    specializations: frozenset[str] = Field(default_factory=frozenset)
    tools: tuple[str, ...] = Field(default_factory=tuple, description="External tools the agent may invoke.")


class Goal(BaseModel):
    """Unit of work submitted by a caller for routing."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    description: str = ""
    tools_needed: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("tools_needed", "toolsNeeded"),
    )

    @field_validator("title", "description", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> str:
        if value is None:
            return ""
        return str(value)

    @field_validator("tools_needed", mode="before")
    @classmethod
    def _coerce_tools(cls, value: object) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if not isinstance(value, Iterable):
            raise ValueError("tools_needed must be a tool name or a list of tool names")
        return [str(item) for item in value]
