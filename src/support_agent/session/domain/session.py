"""AgentSession — the persistable cost and audit summary of one run."""

from pydantic import BaseModel, Field

from support_agent.config.domain.channel import Channel
from support_agent.config.domain.provider import CostRates
from support_agent.engine.domain.result import AgentResult, EscalationResult
from support_agent.tools.domain.tool import ToolCallLog

_TOKENS_PER_MILLION = 1_000_000


class AgentSession(BaseModel, frozen=True):
    ticket_id: str
    message_id: str | None = None
    channel: Channel
    result_type: str
    total_tool_calls: int = Field(ge=0)
    tool_calls_detail: tuple[ToolCallLog, ...] = ()
    kb_articles_used: tuple[str, ...] = ()
    web_searches_performed: int = Field(ge=0)
    input_tokens: int = Field(ge=0)
    output_tokens: int = Field(ge=0)
    estimated_cost_usd: float = Field(ge=0.0)
    total_duration_ms: int = Field(ge=0)
    escalation_reason: str | None = None
    escalation_summary: str | None = None


def estimate_cost(input_tokens: int, output_tokens: int, rates: CostRates) -> float:
    """USD cost of a run's tokens, rounded to 6 decimal places."""
    cost = (input_tokens / _TOKENS_PER_MILLION) * rates.input_per_million + (
        output_tokens / _TOKENS_PER_MILLION
    ) * rates.output_per_million
    return round(cost, 6)


def build_session(
    result: AgentResult,
    ticket_id: str,
    channel: Channel,
    rates: CostRates,
    message_id: str | None = None,
) -> AgentSession:
    escalation_reason: str | None = None
    escalation_summary: str | None = None
    if isinstance(result, EscalationResult):
        escalation_reason = result.escalation_reason
        escalation_summary = result.escalation_summary

    return AgentSession(
        ticket_id=ticket_id,
        message_id=message_id,
        channel=channel,
        result_type=result.type,
        total_tool_calls=result.total_tool_calls,
        tool_calls_detail=result.tool_calls_detail,
        kb_articles_used=result.kb_article_ids,
        web_searches_performed=result.web_search_count,
        input_tokens=result.input_tokens,
        output_tokens=result.output_tokens,
        estimated_cost_usd=estimate_cost(
            result.input_tokens, result.output_tokens, rates=rates
        ),
        total_duration_ms=result.duration_ms,
        escalation_reason=escalation_reason,
        escalation_summary=escalation_summary,
    )
