"""Completion value objects — turns, tool specs, requests, responses, and stream events."""

from typing import Literal

from pydantic import BaseModel, Field

type StopReason = Literal["end_turn", "tool_use", "max_tokens", "other"]


class ToolInvocation(BaseModel, frozen=True):
    """One tool-use request emitted by the model."""

    id: str
    name: str
    arguments: dict[str, object] = Field(default_factory=dict)


class ToolSpec(BaseModel, frozen=True):
    """Provider-neutral tool declaration: a name, a description, and a JSON schema."""

    name: str
    description: str
    parameters: dict[str, object]


class UserTurn(BaseModel, frozen=True):
    role: Literal["user"] = "user"
    content: str


class AssistantTurn(BaseModel, frozen=True):
    """An assistant turn. May carry plain text, tool invocations, or both."""

    role: Literal["assistant"] = "assistant"
    text: str = ""
    tool_invocations: tuple[ToolInvocation, ...] = ()


class ToolResultTurn(BaseModel, frozen=True):
    role: Literal["tool"] = "tool"
    tool_call_id: str
    content: str


type Turn = UserTurn | AssistantTurn | ToolResultTurn


class TokenUsage(BaseModel, frozen=True):
    input_tokens: int = 0
    output_tokens: int = 0


class CompletionRequest(BaseModel, frozen=True):
    """Everything the completion service needs for one round.

    tools=None means no tool schema is attached; the model must answer in text.
    """

    model: str
    system: str
    turns: tuple[Turn, ...]
    max_tokens: int = Field(ge=1)
    tools: tuple[ToolSpec, ...] | None = None


class CompletionResponse(BaseModel, frozen=True):
    """A batch response: text and/or tool invocations, a stop reason, and usage."""

    text: str = ""
    tool_invocations: tuple[ToolInvocation, ...] = ()
    stop_reason: StopReason = "end_turn"
    usage: TokenUsage = Field(default_factory=TokenUsage)


class StreamTextDelta(BaseModel, frozen=True):
    kind: Literal["text_delta"] = "text_delta"
    text: str


class StreamFinished(BaseModel, frozen=True):
    """Terminates a streamed response with the final usage summary."""

    kind: Literal["finished"] = "finished"
    usage: TokenUsage = Field(default_factory=TokenUsage)


type StreamEvent = StreamTextDelta | StreamFinished
