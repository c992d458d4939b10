"""LiteLLMCompletionClient — completion client implementation using LiteLLM."""

import json
from collections.abc import AsyncIterator
from typing import Any

import litellm
from pydantic import ValidationError

from support_agent.completion.domain.message import (
    AssistantTurn,
    CompletionRequest,
    CompletionResponse,
    StopReason,
    StreamEvent,
    StreamFinished,
    StreamTextDelta,
    TokenUsage,
    ToolInvocation,
    ToolResultTurn,
    ToolSpec,
    Turn,
    UserTurn,
)
from support_agent.completion.infrastructure.errors import (
    CompletionInvocationError,
    CompletionRateLimitedError,
)

# 429 is a plain rate limit; 529 is Anthropic's "overloaded" status.
_RATE_LIMIT_STATUSES = frozenset({429, 529})

_STOP_REASONS: dict[str, StopReason] = {
    "stop": "end_turn",
    "end_turn": "end_turn",
    "tool_calls": "tool_use",
    "tool_use": "tool_use",
    "function_call": "tool_use",
    "length": "max_tokens",
    "max_tokens": "max_tokens",
}


class LiteLLMCompletionClient:
    """Completion client bound to one provider credential.

    Construct one instance per credential; pair a primary and a fallback in
    CompletionProviders to enable the rate-limit fallback path.
    """

    def __init__(self, api_key: str | None = None, api_base: str | None = None) -> None:
        self._api_key = api_key
        self._api_base = api_base

    async def create(self, request: CompletionRequest) -> CompletionResponse:
        """Issue one non-streaming request.

        Raises:
            CompletionRateLimitedError: on 429/529 or litellm.RateLimitError.
            CompletionInvocationError: on any other failure or an empty response.
        """
        try:
            response = await litellm.acompletion(**self._build_kwargs(request))
        except Exception as exc:
            raise _classify(exc) from exc

        try:
            return _map_response(response)
        except (ValidationError, AttributeError, TypeError) as exc:
            raise CompletionInvocationError(reason=f"malformed response: {exc}") from exc

    async def stream(self, request: CompletionRequest) -> AsyncIterator[StreamEvent]:
        """Issue one streaming request, yielding text deltas then a StreamFinished.

        Raises:
            CompletionRateLimitedError: on 429/529 or litellm.RateLimitError,
                whether raised when opening the stream or mid-stream.
            CompletionInvocationError: on any other failure.
        """
        kwargs = self._build_kwargs(request)
        kwargs["stream"] = True
        kwargs["stream_options"] = {"include_usage": True}

        usage = TokenUsage()
        try:
            response = await litellm.acompletion(**kwargs)
            try:
                async for chunk in response:
                    chunk_usage = getattr(chunk, "usage", None)
                    if chunk_usage is not None:
                        usage = _map_usage(chunk_usage)
                    if not chunk.choices:
                        continue
                    text = chunk.choices[0].delta.content
                    if text:
                        yield StreamTextDelta(text=text)
            finally:
                # The wrapper holds the HTTP response open until closed.
                close = getattr(response, "aclose", None)
                if close is not None:
                    await close()
        except Exception as exc:
            raise _classify(exc) from exc

        yield StreamFinished(usage=usage)

    def _build_kwargs(self, request: CompletionRequest) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": request.model,
            "max_tokens": request.max_tokens,
            "messages": _build_messages(system=request.system, turns=request.turns),
        }
        if request.tools is not None:
            kwargs["tools"] = [_build_tool(spec) for spec in request.tools]
        if self._api_key is not None:
            kwargs["api_key"] = self._api_key
        if self._api_base is not None:
            kwargs["api_base"] = self._api_base
        return kwargs


def _build_messages(system: str, turns: tuple[Turn, ...]) -> list[dict[str, Any]]:
    """Convert domain turns to the OpenAI chat format LiteLLM accepts."""
    messages: list[dict[str, Any]] = [{"role": "system", "content": system}]
    for turn in turns:
        if isinstance(turn, UserTurn):
            messages.append({"role": "user", "content": turn.content})
        elif isinstance(turn, AssistantTurn):
            message: dict[str, Any] = {"role": "assistant", "content": turn.text or None}
            if turn.tool_invocations:
                message["tool_calls"] = [
                    {
                        "id": inv.id,
                        "type": "function",
                        "function": {
                            "name": inv.name,
                            "arguments": json.dumps(inv.arguments),
                        },
                    }
                    for inv in turn.tool_invocations
                ]
            messages.append(message)
        elif isinstance(turn, ToolResultTurn):
            messages.append(
                {
                    "role": "tool",
                    "tool_call_id": turn.tool_call_id,
                    "content": turn.content,
                }
            )
    return messages


def _build_tool(spec: ToolSpec) -> dict[str, Any]:
    return {
        "type": "function",
        "function": {
            "name": spec.name,
            "description": spec.description,
            "parameters": spec.parameters,
        },
    }


def _map_response(response: Any) -> CompletionResponse:
    if not response.choices:
        raise CompletionInvocationError(reason="response contained no choices")

    choice = response.choices[0]
    message = choice.message
    return CompletionResponse(
        text=message.content or "",
        tool_invocations=tuple(
            _map_tool_call(tc) for tc in (getattr(message, "tool_calls", None) or [])
        ),
        stop_reason=_STOP_REASONS.get(choice.finish_reason or "", "other"),
        usage=_map_usage(getattr(response, "usage", None)),
    )


def _map_tool_call(tool_call: Any) -> ToolInvocation:
    raw_arguments = tool_call.function.arguments or "{}"
    if isinstance(raw_arguments, dict):
        arguments = raw_arguments
    else:
        try:
            arguments = json.loads(raw_arguments)
        except (json.JSONDecodeError, TypeError):
            arguments = {}
    if not isinstance(arguments, dict):
        arguments = {}
    return ToolInvocation(
        id=tool_call.id,
        name=tool_call.function.name,
        arguments=arguments,
    )


def _map_usage(raw: Any) -> TokenUsage:
    if raw is None:
        return TokenUsage()
    return TokenUsage(
        input_tokens=getattr(raw, "prompt_tokens", None) or 0,
        output_tokens=getattr(raw, "completion_tokens", None) or 0,
    )


def _classify(exc: Exception) -> CompletionInvocationError:
    if isinstance(exc, CompletionInvocationError):
        return exc
    if isinstance(exc, litellm.RateLimitError):
        return CompletionRateLimitedError(reason=str(exc))
    if getattr(exc, "status_code", None) in _RATE_LIMIT_STATUSES:
        return CompletionRateLimitedError(reason=str(exc))
    return CompletionInvocationError(reason=str(exc))
