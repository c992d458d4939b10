"""Tests for the AgentResult and AgentStreamEvent tagged unions."""

import pytest
from pydantic import TypeAdapter, ValidationError

from support_agent.engine.domain.event import AgentStreamEvent, CompleteEvent
from support_agent.engine.domain.result import (
    AgentResult,
    EscalationResult,
    ResponseResult,
    TimeoutResult,
)
from support_agent.tools.domain.tool import ToolCallLog

_LOG = ToolCallLog(tool="search_web", input={"query": "q"}, output_summary="ok", duration_ms=3)


class TestResultInvariants:
    def test_tool_count_must_match_detail(self) -> None:
        with pytest.raises(ValidationError):
            ResponseResult(content="x", confidence=0.5, total_tool_calls=2, tool_calls_detail=(_LOG,))

    def test_web_search_count_is_capped_at_three(self) -> None:
        with pytest.raises(ValidationError):
            ResponseResult(content="x", confidence=0.5, web_search_count=4)

    def test_confidence_must_be_in_unit_interval(self) -> None:
        with pytest.raises(ValidationError):
            TimeoutResult(content="x", confidence=1.5)

    def test_escalation_requires_reason_and_summary(self) -> None:
        with pytest.raises(ValidationError):
            EscalationResult(content="x", confidence=0.2)


class TestDiscriminatedUnion:
    def test_type_tag_selects_the_variant(self) -> None:
        adapter = TypeAdapter(AgentResult)

        result = adapter.validate_python(
            {"type": "timeout", "content": "later", "confidence": 0.3}
        )

        assert isinstance(result, TimeoutResult)

    def test_complete_event_round_trips_through_json(self) -> None:
        event = CompleteEvent(
            result=EscalationResult(
                content="connected",
                confidence=0.2,
                escalation_reason="legal",
                escalation_summary="threat",
                total_tool_calls=1,
                tool_calls_detail=(_LOG,),
            )
        )

        parsed = TypeAdapter(AgentStreamEvent).validate_json(event.model_dump_json())

        assert parsed == event
