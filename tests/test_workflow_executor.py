from __future__ import annotations

import asyncio

import pytest
from prometheus_client import REGISTRY

from agentorch.core.config import DEFAULT_PROCESSING_NOTICE_PROBABILITY
from agentorch.orchestration.executor import CancellationToken
from agentorch.orchestration.planner import plan_workflow
from agentorch.schemas.agents import AgentVariant
from agentorch.schemas.progress import TextProgress
from agentorch.schemas.results import SdrResult
from tests.helpers.stubs import (
    FailingSynthesizer,
    RecordingSink,
    RecordingSleep,
    build_executor,
    fast_settings,
)


@pytest.mark.asyncio
async def test_execute_reports_every_step_in_plan_order() -> None:
    sink = RecordingSink()
    executor = build_executor()

    response = await executor.execute(AgentVariant.SDR, {"contacts": []}, sink)

    assert response.success is True
    assert response.status == "completed"
    assert response.agent == "sdr"
    plan = plan_workflow(AgentVariant.SDR)
    step_texts = [text for text in sink.texts if text in plan.labels]
    assert step_texts == plan.labels
    assert sink.texts[0] == "Initializing AI SDR Agent..."
    assert sink.texts[-1] == "AI SDR Agent completed successfully"
    assert len(sink.updates) >= len(plan)


@pytest.mark.asyncio
async def test_step_indices_never_decrease() -> None:
    sink = RecordingSink()

    await build_executor(settings=fast_settings(processing_notice_probability=1.0)).execute("email", None, sink)

    indices = [update.step_index for update in sink.updates if update.step_index is not None]
    assert indices == sorted(indices)
    assert set(indices) == set(range(7))
    assert all(update.run_id == sink.updates[0].run_id for update in sink.updates)


@pytest.mark.asyncio
async def test_processing_notice_follows_its_step() -> None:
    sink = RecordingSink()

    await build_executor(settings=fast_settings(processing_notice_probability=1.0)).execute("calendar", None, sink)

    labels = plan_workflow("calendar").labels
    expected = ["Initializing Calendar Management Agent..."]
    for label in labels:
        expected.extend([label, f"{label} - Processing..."])
    expected.append("Calendar Management Agent completed successfully")
    assert sink.texts == expected


@pytest.mark.asyncio
async def test_processing_notice_can_be_disabled() -> None:
    sink = RecordingSink()

    await build_executor(settings=fast_settings(processing_notice_probability=0.0)).execute("analysis", None, sink)

    assert not any(text.endswith(" - Processing...") for text in sink.texts)
    assert len(sink.texts) == 9


def test_processing_notice_probability_default() -> None:
    assert DEFAULT_PROCESSING_NOTICE_PROBABILITY == pytest.approx(0.3)
    assert fast_settings().execution.processing_notice_probability == pytest.approx(0.3)


@pytest.mark.asyncio
async def test_seeded_runs_are_reproducible() -> None:
    first, second = RecordingSink(), RecordingSink()

    one = await build_executor(seed=11).execute("content", None, first)
    two = await build_executor(seed=11).execute("content", None, second)

    assert first.texts == second.texts
    assert one.data == two.data


@pytest.mark.asyncio
async def test_step_waits_are_jittered_within_window() -> None:
    sleep = RecordingSleep()
    settings = fast_settings(time_scale=1.0, processing_notice_probability=0.0)

    await build_executor(settings=settings, sleep=sleep).execute(AgentVariant.RESEARCH, None, None)

    init_pause, *step_waits = sleep.calls
    assert init_pause == pytest.approx(0.5)
    assert len(step_waits) == 7
    assert all(1.0 <= wait <= 3.0 for wait in step_waits)
    # "Analyzing input parameters" is nominally 800ms, so its window collapses to the floor.
    assert step_waits[0] == pytest.approx(1.0)


@pytest.mark.asyncio
async def test_time_scale_zero_still_yields_between_steps() -> None:
    sleep = RecordingSleep()

    await build_executor(sleep=sleep, settings=fast_settings(processing_notice_probability=0.0)).execute("sdr")

    assert sleep.calls == [0.0] * 8


@pytest.mark.asyncio
async def test_sync_sink_receives_typed_updates() -> None:
    received: list[TextProgress] = []

    response = await build_executor().execute("automation", None, received.append)

    assert response.success
    assert all(isinstance(update, TextProgress) for update in received)
    assert received[0].status == "initializing"
    assert received[0].step_index is None
    assert received[-1].status == "completed"
    assert received[-1].step_index is None


@pytest.mark.asyncio
async def test_unknown_variant_fails_without_progress() -> None:
    sink = RecordingSink()

    response = await build_executor().execute("ghost", None, sink)

    assert response.success is False
    assert response.error == "Agent ghost not found"
    assert response.data is None
    assert sink.updates == []


@pytest.mark.asyncio
async def test_sink_error_fails_the_run_with_its_message() -> None:
    sink = RecordingSink(fail_on="Connecting to required tools", error=RuntimeError("sink offline"))

    response = await build_executor().execute("planning", None, sink)

    assert response.success is False
    assert response.error == "sink offline"
    assert response.status == "failed"
    assert "Connecting to required tools" not in sink.texts
    assert "Strategic Planning Agent completed successfully" not in sink.texts


@pytest.mark.asyncio
async def test_error_without_message_reports_unknown_error() -> None:
    sink = RecordingSink(fail_on="Analyzing input parameters", error=RuntimeError())

    response = await build_executor().execute("planning", None, sink)

    assert response.success is False
    assert response.error == "Unknown error"


@pytest.mark.asyncio
async def test_synthesis_failure_never_announces_completion() -> None:
    sink = RecordingSink()
    executor = build_executor(synthesizer=FailingSynthesizer(ValueError("bad shape")))

    response = await executor.execute("sdr", None, sink)

    assert response.success is False
    assert response.error == "bad shape"
    assert "AI SDR Agent completed successfully" not in sink.texts


@pytest.mark.asyncio
async def test_cancellation_token_stops_before_next_step() -> None:
    token = CancellationToken()
    sink = RecordingSink()

    def cancel_after_third_wait(count: int) -> None:
        if count == 3:
            token.cancel("stop")

    executor = build_executor(
        sleep=RecordingSleep(on_call=cancel_after_third_wait),
        settings=fast_settings(processing_notice_probability=0.0),
    )
    response = await executor.execute("sdr", None, sink, cancel_token=token)

    assert response.success is False
    assert response.status == "cancelled"
    assert response.error == "Execution cancelled: stop"
    # init pause plus two step waits completed; the third wait belonged to step index 1.
    assert sink.texts == [
        "Initializing AI SDR Agent...",
        "Analyzing input parameters",
        "Initializing agent capabilities",
    ]


@pytest.mark.asyncio
async def test_precancelled_token_emits_only_the_initial_notice() -> None:
    token = CancellationToken()
    token.cancel()
    sink = RecordingSink()

    response = await build_executor().execute("email", None, sink, cancel_token=token)

    assert response.status == "cancelled"
    assert response.error == "Execution cancelled: cancelled by caller"
    assert sink.texts == ["Initializing Email Campaign Agent..."]


@pytest.mark.asyncio
async def test_deadline_cancels_a_slow_run() -> None:
    executor = build_executor(settings=fast_settings(time_scale=1.0), sleep=asyncio.sleep)

    response = await executor.execute("research", None, None, cancel_token=CancellationToken.with_timeout(0.01))

    assert response.status == "cancelled"
    assert response.error == "Execution cancelled: deadline exceeded"


@pytest.mark.asyncio
async def test_configured_run_timeout_applies_without_token() -> None:
    settings = fast_settings(time_scale=1.0, run_timeout_seconds=0.01)

    response = await build_executor(settings=settings, sleep=asyncio.sleep).execute("research")

    assert response.status == "cancelled"


@pytest.mark.asyncio
async def test_configured_run_timeout_applies_with_caller_token() -> None:
    settings = fast_settings(time_scale=1.0, run_timeout_seconds=0.01)
    token = CancellationToken()

    response = await build_executor(settings=settings, sleep=asyncio.sleep).execute(
        "research", cancel_token=token
    )

    assert response.status == "cancelled"
    assert response.error == "Execution cancelled: deadline exceeded"
    assert not token.cancelled


@pytest.mark.asyncio
async def test_caller_cancel_reaches_a_deadline_bound_run() -> None:
    token = CancellationToken()
    token.cancel("stop")
    settings = fast_settings(run_timeout_seconds=60.0)

    response = await build_executor(settings=settings).execute("research", cancel_token=token)

    assert response.error == "Execution cancelled: stop"


def test_derived_token_follows_parent_and_keeps_the_earlier_deadline() -> None:
    parent = CancellationToken.with_timeout(30.0)
    child = parent.with_deadline(60.0)

    remaining = child.remaining()
    assert remaining is not None and remaining <= 30.0
    assert not child.cancelled

    parent.cancel("parent stopped")
    assert child.cancelled
    assert child.reason == "parent stopped"


def test_timeout_must_be_positive() -> None:
    with pytest.raises(ValueError):
        CancellationToken.with_timeout(0)
    with pytest.raises(ValueError):
        CancellationToken().with_deadline(0)


@pytest.mark.asyncio
async def test_task_cancellation_propagates_and_is_counted() -> None:
    labels = {"variant": "research", "status": "cancelled"}
    before = REGISTRY.get_sample_value("agentorch_agent_runs_total", labels) or 0.0
    blocked = asyncio.Event()

    async def never_wakes(_: float) -> None:
        blocked.set()
        await asyncio.Event().wait()

    task = asyncio.create_task(build_executor(sleep=never_wakes).execute("research"))
    await blocked.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert REGISTRY.get_sample_value("agentorch_agent_runs_total", labels) == pytest.approx(before + 1.0)


@pytest.mark.asyncio
async def test_successful_run_returns_variant_shaped_result_and_metrics() -> None:
    labels = {"variant": "sdr", "status": "completed"}
    before = REGISTRY.get_sample_value("agentorch_agent_runs_total", labels) or 0.0

    response = await build_executor().execute("sdr", {"contacts": [{"id": 1}, {"id": 2}]})

    assert isinstance(response.data, SdrResult)
    assert response.data.outreach_sent <= 2
    assert REGISTRY.get_sample_value("agentorch_agent_runs_total", labels) == pytest.approx(before + 1.0)
