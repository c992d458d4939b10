"""CompletionClient Protocol — structural interface for text-generation services."""

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol

from support_agent.completion.domain.message import (
    CompletionRequest,
    CompletionResponse,
    StreamEvent,
)


class CompletionClient(Protocol):
    """Structural interface satisfied by any completion-service implementation.

    create() issues one non-streaming request. stream() returns an async
    iterator of text deltas terminated by a single StreamFinished event.
    Both raise CompletionRateLimitedError for rate-limit/overload responses and
    CompletionInvocationError for every other failure.
    """

    async def create(self, request: CompletionRequest) -> CompletionResponse: ...

    def stream(self, request: CompletionRequest) -> AsyncIterator[StreamEvent]: ...


@dataclass(frozen=True)
class CompletionProviders:
    """The primary client and, when a second credential is configured, its fallback."""

    primary: CompletionClient
    fallback: CompletionClient | None = None
