"""AgentObserver port — domain events emitted during a run of the orchestration loop."""

from typing import Protocol


class AgentObserver(Protocol):
    """Observer port for orchestration-loop events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def run_started(
        self, ticket_id: str, channel: str, model: str, streaming: bool
    ) -> None: ...

    def round_started(self, ticket_id: str, round_index: int) -> None: ...

    def tool_executed(
        self, ticket_id: str, tool: str, duration_ms: int, success: bool
    ) -> None: ...

    def tool_budget_exhausted(self, ticket_id: str, skipped_tool: str) -> None: ...

    def fallback_provider_used(self, ticket_id: str, reason: str) -> None: ...

    def run_completed(
        self,
        ticket_id: str,
        result_type: str,
        total_tool_calls: int,
        duration_ms: int,
        input_tokens: int,
        output_tokens: int,
    ) -> None: ...

    def run_failed(self, ticket_id: str, reason: str) -> None: ...
