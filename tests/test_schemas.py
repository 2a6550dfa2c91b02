from __future__ import annotations

from uuid import uuid4

import pytest
from pydantic import ValidationError

from agentorch.schemas.agents import AgentVariant, Goal
from agentorch.schemas.results import AgentRunResponse, SdrResult, result_fields


def _sdr(**overrides: object) -> SdrResult:
    values = {
        "execution_time": 2500,
        "success_rate": 0.95,
        "tools_used": ["linkedin"],
        "outreach_sent": 10,
        "connection_requests": 4,
        "response_rate": 0.2,
        "qualified_leads": 2,
    }
    values.update(overrides)
    return SdrResult(**values)


def test_goal_accepts_legacy_key_and_single_tool() -> None:
    goal = Goal.model_validate({"title": "Outreach", "toolsNeeded": "linkedin"})

    assert goal.tools_needed == ["linkedin"]
    assert goal.description == ""


def test_results_reject_fields_from_other_variants() -> None:
    with pytest.raises(ValidationError):
        _sdr(emails_sent=5)


def test_results_reject_out_of_range_rates() -> None:
    with pytest.raises(ValidationError):
        _sdr(response_rate=1.4)


def test_result_fields_lists_base_and_extension() -> None:
    assert result_fields(AgentVariant.SDR) == frozenset(_sdr().model_dump())


def test_response_serializes_subclass_fields() -> None:
    response = AgentRunResponse(success=True, data=_sdr(), agent="sdr", run_id=uuid4(), status="completed")

    dumped = response.model_dump()
    legacy = response.to_legacy()

    assert dumped["data"]["outreach_sent"] == 10
    assert legacy == {"success": True, "data": _sdr().model_dump()}


def test_goal_rejects_non_iterable_tools() -> None:
    with pytest.raises(ValidationError):
        Goal.model_validate({"title": "Outreach", "tools_needed": 5})
