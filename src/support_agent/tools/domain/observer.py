"""ToolObserver port — domain events emitted while dispatching tools."""

from typing import Protocol


class ToolObserver(Protocol):
    def tool_failed(self, tool: str, reason: str) -> None: ...

    def escalation_blocked(
        self, channel: str, prior_tool_calls: int, required_tool_calls: int
    ) -> None: ...

    def escalation_approved(self, channel: str, reason: str) -> None: ...
