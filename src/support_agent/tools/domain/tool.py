"""Tool value objects — names, run context, call logs, and dispatch outcomes."""

from enum import StrEnum

from pydantic import BaseModel, Field

from support_agent.config.domain.channel import Channel


class ToolName(StrEnum):
    SEARCH_KNOWLEDGE_BASE = "search_knowledge_base"
    SEARCH_WEB = "search_web"
    GET_CUSTOMER_CONTEXT = "get_customer_context"
    GET_TICKET_MESSAGES = "get_ticket_messages"
    ESCALATE_TO_HUMAN = "escalate_to_human"


SEARCH_TOOLS = frozenset({ToolName.SEARCH_KNOWLEDGE_BASE, ToolName.SEARCH_WEB})


class ToolContext(BaseModel, frozen=True):
    """Per-call view of the run: who the customer is and how much effort was spent.

    prior_tool_calls counts tool calls already executed in this run, not
    including the one being dispatched.
    """

    ticket_id: str
    customer_id: str
    channel: Channel
    prior_tool_calls: int = Field(default=0, ge=0)
    web_searches_used: int = Field(default=0, ge=0)


class ToolCallLog(BaseModel, frozen=True):
    """Audit record of one executed tool call. Never mutated after creation."""

    tool: str
    input: dict[str, object]
    output_summary: str
    duration_ms: int = Field(ge=0)


class EscalationPayload(BaseModel, frozen=True):
    """Approved hand-off. reason and summary are internal-only."""

    escalated: bool = True
    reason: str
    summary: str


class ToolOutcome(BaseModel, frozen=True):
    """Everything a dispatch produced.

    text is what the model sees. The structured fields let the loop track
    grounding, web-search usage, and escalation without re-parsing text.
    """

    text: str
    log: ToolCallLog
    success: bool = True
    article_ids: tuple[str, ...] = ()
    web_search_performed: bool = False
    escalation: EscalationPayload | None = None
