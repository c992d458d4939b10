"""AgentResult — the terminal outcome of a run, as a tagged union of four kinds."""

from typing import Annotated, Literal, Self

from pydantic import BaseModel, Field, model_validator

from support_agent.tools.domain.tool import ToolCallLog


class _ResultBase(BaseModel, frozen=True):
    """Fields every outcome carries."""

    content: str
    confidence: float = Field(ge=0.0, le=1.0)
    kb_article_ids: tuple[str, ...] = ()
    web_search_count: int = Field(default=0, ge=0, le=3)
    total_tool_calls: int = Field(default=0, ge=0)
    tool_calls_detail: tuple[ToolCallLog, ...] = ()
    duration_ms: int = Field(default=0, ge=0)
    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _tool_count_matches_detail(self) -> Self:
        if self.total_tool_calls != len(self.tool_calls_detail):
            raise ValueError(
                f"total_tool_calls={self.total_tool_calls} but"
                f" {len(self.tool_calls_detail)} tool call logs"
            )
        return self


class ResponseResult(_ResultBase, frozen=True):
    type: Literal["response"] = "response"


class EscalationResult(_ResultBase, frozen=True):
    """Handed to a human. content is customer-safe; reason and summary are internal."""

    type: Literal["escalation"] = "escalation"
    escalation_reason: str
    escalation_summary: str


class TimeoutResult(_ResultBase, frozen=True):
    type: Literal["timeout"] = "timeout"


class ErrorResult(_ResultBase, frozen=True):
    type: Literal["error"] = "error"
    error: str


type AgentResult = Annotated[
    ResponseResult | EscalationResult | TimeoutResult | ErrorResult,
    Field(discriminator="type"),
]
