from __future__ import annotations

from typing import Any, Mapping
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny

from .agents import AgentVariant


class AgentResult(BaseModel):
    """Base metrics shared by every agent result; subclasses add one fixed extension record."""

    model_config = ConfigDict(extra="forbid")

    execution_time: int = Field(..., ge=0, description="Simulated execution time in milliseconds.")
    success_rate: float = Field(..., ge=0.0, le=1.0)
    tools_used: list[str] = Field(default_factory=list)


class PlanningResult(AgentResult):
    milestones_defined: int = Field(..., ge=0)
    action_items: int = Field(..., ge=0)
    timeline_weeks: int = Field(..., ge=0)
    plan_confidence: float = Field(..., ge=0.0, le=1.0)


class ResearchResult(AgentResult):
    sources_analyzed: int = Field(..., ge=0)
    insights_generated: int = Field(..., ge=0)
    competitors_profiled: int = Field(..., ge=0)
    report_pages: int = Field(..., ge=0)


class ContentResult(AgentResult):
    pieces_created: int = Field(..., ge=0)
    word_count: int = Field(..., ge=0)
    platforms_published: int = Field(..., ge=0)
    engagement_score: float = Field(..., ge=0.0, le=1.0)


class ExecutionResult(AgentResult):
    tasks_completed: int = Field(..., ge=0)
    integrations_successful: int = Field(..., ge=0)
    actions_executed: int = Field(..., ge=0)
    errors_resolved: int = Field(..., ge=0)


class SdrResult(AgentResult):
    outreach_sent: int = Field(..., ge=0)
    connection_requests: int = Field(..., ge=0)
    response_rate: float = Field(..., ge=0.0, le=1.0)
    qualified_leads: int = Field(..., ge=0)


class EmailResult(AgentResult):
    emails_sent: int = Field(..., ge=0)
    open_rate: float = Field(..., ge=0.0, le=1.0)
    click_rate: float = Field(..., ge=0.0, le=1.0)
    replies_received: int = Field(..., ge=0)


class CalendarResult(AgentResult):
    meetings_scheduled: int = Field(..., ge=0)
    conflicts_resolved: int = Field(..., ge=0)
    invitations_sent: int = Field(..., ge=0)
    attendance_rate: float = Field(..., ge=0.0, le=1.0)


class AnalysisResult(AgentResult):
    data_points_analyzed: int = Field(..., ge=0)
    insights_found: int = Field(..., ge=0)
    trends_identified: int = Field(..., ge=0)
    accuracy_score: float = Field(..., ge=0.0, le=1.0)


class AutomationResult(AgentResult):
    workflows_created: int = Field(..., ge=0)
    triggers_configured: int = Field(..., ge=0)
    time_saved_hours: float = Field(..., ge=0.0)
    automation_coverage: float = Field(..., ge=0.0, le=1.0)


RESULT_MODELS: Mapping[AgentVariant, type[AgentResult]] = {
    AgentVariant.PLANNING: PlanningResult,
    AgentVariant.RESEARCH: ResearchResult,
    AgentVariant.CONTENT: ContentResult,
    AgentVariant.EXECUTION: ExecutionResult,
    AgentVariant.SDR: SdrResult,
    AgentVariant.EMAIL: EmailResult,
    AgentVariant.CALENDAR: CalendarResult,
    AgentVariant.ANALYSIS: AnalysisResult,
    AgentVariant.AUTOMATION: AutomationResult,
}

_missing = set(AgentVariant) - set(RESULT_MODELS)
if _missing:  # pragma: no cover - guarded at import
    raise RuntimeError(f"Result models missing for variants: {sorted(v.value for v in _missing)}")


def result_fields(variant: AgentVariant) -> frozenset[str]:
    """Field names carried by the result of ``variant``."""
    return frozenset(RESULT_MODELS[variant].model_fields)


class AgentRunResponse(BaseModel):
    """Outcome of one orchestration call."""

    success: bool
    data: SerializeAsAny[AgentResult] | None = None
    error: str | None = None
    agent: str | None = None
    run_id: UUID | None = None
    status: str | None = None

    def to_legacy(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            payload["data"] = self.data.model_dump()
        if self.error is not None:
            payload["error"] = self.error
        return payload
