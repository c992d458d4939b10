"""AgentStreamEvent — progress events emitted by the incremental execution mode."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from support_agent.engine.domain.result import AgentResult, ErrorResult


class ThinkingEvent(BaseModel, frozen=True):
    type: Literal["thinking"] = "thinking"


class ToolCallEvent(BaseModel, frozen=True):
    type: Literal["tool_call"] = "tool_call"
    tool: str
    description: str


class ToolResultEvent(BaseModel, frozen=True):
    type: Literal["tool_result"] = "tool_result"
    tool: str
    success: bool


class TextDeltaEvent(BaseModel, frozen=True):
    type: Literal["text_delta"] = "text_delta"
    content: str


class CompleteEvent(BaseModel, frozen=True):
    """Always the last event of a successful run."""

    type: Literal["complete"] = "complete"
    result: AgentResult


class ErrorEvent(BaseModel, frozen=True):
    """Always the last event of a failed run. result carries the accounting so far."""

    type: Literal["error"] = "error"
    error: str
    result: ErrorResult


type AgentStreamEvent = Annotated[
    ThinkingEvent
    | ToolCallEvent
    | ToolResultEvent
    | TextDeltaEvent
    | CompleteEvent
    | ErrorEvent,
    Field(discriminator="type"),
]
