from __future__ import annotations

import random
from collections.abc import Mapping, Sequence
from typing import Any, Callable

from ..agents.registry import AgentRegistry, get_registry
from ..core.config import Settings, get_settings
from ..core.logging import get_logger
from ..schemas.agents import AgentVariant, Goal
from ..schemas.results import RESULT_MODELS, AgentResult

logger = get_logger(name=__name__)

ExtensionBuilder = Callable[[random.Random, int | None], dict[str, Any]]


def _bounded(rng: random.Random, low: int, high: int, audience: int | None) -> int:
    """Random count in ``[low, high]``, capped at the audience size when one is known."""
    if audience is None:
        return rng.randint(low, high)
    if audience <= 0:
        return 0
    return rng.randint(min(low, audience), min(high, audience))


def _ratio(rng: random.Random, low: float, high: float) -> float:
    return round(rng.uniform(low, high), 3)


def _planning(rng: random.Random, audience: int | None) -> dict[str, Any]:
    milestones = rng.randint(3, 8)
    return {
        "milestones_defined": milestones,
        "action_items": milestones * rng.randint(2, 5),
        "timeline_weeks": rng.randint(4, 16),
        "plan_confidence": _ratio(rng, 0.75, 0.98),
    }


def _research(rng: random.Random, audience: int | None) -> dict[str, Any]:
    return {
        "sources_analyzed": rng.randint(15, 60),
        "insights_generated": rng.randint(5, 20),
        "competitors_profiled": rng.randint(3, 10),
        "report_pages": rng.randint(4, 25),
    }


def _content(rng: random.Random, audience: int | None) -> dict[str, Any]:
    pieces = rng.randint(1, 10)
    return {
        "pieces_created": pieces,
        "word_count": pieces * rng.randint(300, 1200),
        "platforms_published": rng.randint(1, 4),
        "engagement_score": _ratio(rng, 0.6, 0.95),
    }


def _execution(rng: random.Random, audience: int | None) -> dict[str, Any]:
    tasks = rng.randint(3, 15)
    return {
        "tasks_completed": tasks,
        "integrations_successful": rng.randint(1, 5),
        "actions_executed": tasks + rng.randint(0, 10),
        "errors_resolved": rng.randint(0, 3),
    }


def _sdr(rng: random.Random, audience: int | None) -> dict[str, Any]:
    outreach = _bounded(rng, 10, 50, audience)
    return {
        "outreach_sent": outreach,
        "connection_requests": rng.randint(0, outreach),
        "response_rate": _ratio(rng, 0.1, 0.4),
        "qualified_leads": rng.randint(0, outreach // 3),
    }


def _email(rng: random.Random, audience: int | None) -> dict[str, Any]:
    sent = _bounded(rng, 50, 500, audience)
    return {
        "emails_sent": sent,
        "open_rate": _ratio(rng, 0.2, 0.5),
        "click_rate": _ratio(rng, 0.02, 0.15),
        "replies_received": rng.randint(0, sent // 10),
    }


def _calendar(rng: random.Random, audience: int | None) -> dict[str, Any]:
    invitations = _bounded(rng, 5, 30, audience)
    return {
        "meetings_scheduled": rng.randint(0, invitations),
        "conflicts_resolved": rng.randint(0, 5),
        "invitations_sent": invitations,
        "attendance_rate": _ratio(rng, 0.7, 0.95),
    }


def _analysis(rng: random.Random, audience: int | None) -> dict[str, Any]:
    return {
        "data_points_analyzed": rng.randint(1_000, 50_000),
        "insights_found": rng.randint(3, 15),
        "trends_identified": rng.randint(2, 8),
        "accuracy_score": _ratio(rng, 0.85, 0.99),
    }


def _automation(rng: random.Random, audience: int | None) -> dict[str, Any]:
    workflows = rng.randint(1, 6)
    return {
        "workflows_created": workflows,
        "triggers_configured": workflows * rng.randint(1, 4),
        "time_saved_hours": round(rng.uniform(5.0, 40.0), 1),
        "automation_coverage": _ratio(rng, 0.5, 0.9),
    }


_EXTENSION_BUILDERS: Mapping[AgentVariant, ExtensionBuilder] = {
    AgentVariant.PLANNING: _planning,
    AgentVariant.RESEARCH: _research,
    AgentVariant.CONTENT: _content,
    AgentVariant.EXECUTION: _execution,
    AgentVariant.SDR: _sdr,
    AgentVariant.EMAIL: _email,
    AgentVariant.CALENDAR: _calendar,
    AgentVariant.ANALYSIS: _analysis,
    AgentVariant.AUTOMATION: _automation,
}

_missing = set(AgentVariant) - set(_EXTENSION_BUILDERS)
if _missing:  # pragma: no cover - guarded at import
    raise RuntimeError(f"Result builders missing for variants: {sorted(v.value for v in _missing)}")


def audience_size(payload: Any) -> int | None:
    """Number of CRM contacts supplied with the payload, if any."""
    if isinstance(payload, Goal) or not isinstance(payload, Mapping):
        return None
    contacts = payload.get("contacts")
    if isinstance(contacts, Sequence) and not isinstance(contacts, (str, bytes)):
        return len(contacts)
    return None


class ResultSynthesizer:
    """Builds the typed result record for a finished run."""

    def __init__(
        self,
        registry: AgentRegistry | None = None,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._registry = registry or get_registry()
        self._settings = settings or get_settings()
        if rng is None:
            rng = random.Random(self._settings.execution.random_seed)
        self._rng = rng

    def synthesize(self, variant: AgentVariant | str, payload: Any = None) -> AgentResult:
        profile = self._registry.lookup(variant)
        config = self._settings.synthesis
        audience = audience_size(payload)
        record: dict[str, Any] = {
            "execution_time": self._rng.randint(config.execution_time_min_ms, config.execution_time_max_ms),
            "success_rate": _ratio(self._rng, config.success_rate_floor, 1.0),
            "tools_used": list(profile.tools),
        }
        record.update(_EXTENSION_BUILDERS[profile.variant](self._rng, audience))
        result = RESULT_MODELS[profile.variant].model_validate(record)
        logger.debug(
            "result_synthesized",
            variant=profile.variant.value,
            audience=audience,
            execution_time=result.execution_time,
        )
        return result
