"""Structlog implementation of the AgentObserver port."""

import structlog


class StructlogAgentObserver:
    """Delegates orchestration-loop events to structlog.

    Satisfies the AgentObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def run_started(
        self, ticket_id: str, channel: str, model: str, streaming: bool
    ) -> None:
        self._log.info(
            "agent.run_started",
            ticket_id=ticket_id,
            channel=str(channel),
            model=model,
            streaming=streaming,
        )

    def round_started(self, ticket_id: str, round_index: int) -> None:
        self._log.debug("agent.round_started", ticket_id=ticket_id, round_index=round_index)

    def tool_executed(
        self, ticket_id: str, tool: str, duration_ms: int, success: bool
    ) -> None:
        self._log.info(
            "agent.tool_executed",
            ticket_id=ticket_id,
            tool=tool,
            duration_ms=duration_ms,
            success=success,
        )

    def tool_budget_exhausted(self, ticket_id: str, skipped_tool: str) -> None:
        self._log.warning(
            "agent.tool_budget_exhausted", ticket_id=ticket_id, skipped_tool=skipped_tool
        )

    def fallback_provider_used(self, ticket_id: str, reason: str) -> None:
        self._log.warning("agent.fallback_provider_used", ticket_id=ticket_id, reason=reason)

    def run_completed(
        self,
        ticket_id: str,
        result_type: str,
        total_tool_calls: int,
        duration_ms: int,
        input_tokens: int,
        output_tokens: int,
    ) -> None:
        self._log.info(
            "agent.run_completed",
            ticket_id=ticket_id,
            result_type=result_type,
            total_tool_calls=total_tool_calls,
            duration_ms=duration_ms,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )

    def run_failed(self, ticket_id: str, reason: str) -> None:
        self._log.error("agent.run_failed", ticket_id=ticket_id, reason=reason)
