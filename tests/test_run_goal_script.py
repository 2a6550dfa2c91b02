from __future__ import annotations

from typing import Any, AsyncIterator

import pytest

from agentorch.schemas.results import AgentRunResponse
from scripts.run_goal import _consume
from tests.helpers.stubs import build_orchestrator


async def _items(*items: Any) -> AsyncIterator[Any]:
    for item in items:
        yield item


@pytest.mark.asyncio
async def test_consume_returns_the_final_response(capsys: pytest.CaptureFixture[str]) -> None:
    response = await _consume(build_orchestrator().stream("analysis"))

    assert response.success is True
    assert response.agent == "analysis"
    assert "Initializing Data Analysis Agent..." in capsys.readouterr().out


@pytest.mark.asyncio
async def test_consume_rejects_a_stream_without_response() -> None:
    with pytest.raises(RuntimeError):
        await _consume(_items())


@pytest.mark.asyncio
async def test_consume_keeps_the_last_response() -> None:
    response = AgentRunResponse(success=False, error="boom", status="failed")

    assert await _consume(_items(response)) is response
