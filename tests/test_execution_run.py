from __future__ import annotations

import pytest

from agentorch.agents.exceptions import InvalidRunTransitionError
from agentorch.orchestration.state import RunStatus, new_run
from agentorch.schemas.agents import AgentVariant


def test_run_moves_forward_through_steps_to_completion() -> None:
    run = new_run(AgentVariant.SDR, payload={"contacts": []})

    assert run.status is RunStatus.INITIALIZING
    assert run.step_index == -1

    run.start(7)
    for index in range(7):
        run.advance(index)
        assert run.step_index == index
    run.complete()

    assert run.status is RunStatus.COMPLETED
    assert run.is_terminal
    assert run.updated_at >= run.created_at


def test_step_index_never_decreases() -> None:
    run = new_run(AgentVariant.EMAIL)
    run.start(7)
    run.advance(2)

    with pytest.raises(InvalidRunTransitionError, match="must increase"):
        run.advance(1)
    with pytest.raises(InvalidRunTransitionError, match="must increase"):
        run.advance(2)
    assert run.step_index == 2


def test_step_index_is_bounded_by_plan() -> None:
    run = new_run(AgentVariant.EMAIL)
    run.start(3)

    with pytest.raises(InvalidRunTransitionError, match="outside plan"):
        run.advance(3)


def test_steps_require_a_started_run() -> None:
    run = new_run(AgentVariant.ANALYSIS)

    with pytest.raises(InvalidRunTransitionError, match="expected running"):
        run.advance(0)
    with pytest.raises(InvalidRunTransitionError):
        run.complete()


def test_terminal_runs_reject_further_transitions() -> None:
    run = new_run(AgentVariant.CONTENT)
    run.start(7)
    run.fail("boom")

    assert run.status is RunStatus.FAILED
    assert run.error == "boom"
    with pytest.raises(InvalidRunTransitionError, match="already failed"):
        run.cancel("late")
    with pytest.raises(InvalidRunTransitionError):
        run.advance(0)


def test_cancel_records_reason_before_start() -> None:
    run = new_run(AgentVariant.CALENDAR)

    run.cancel("caller went away")

    assert run.status is RunStatus.CANCELLED
    assert run.error == "caller went away"


def test_runs_get_distinct_ids() -> None:
    assert new_run(AgentVariant.SDR).run_id != new_run(AgentVariant.SDR).run_id
