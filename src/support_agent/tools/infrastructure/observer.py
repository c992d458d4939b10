"""Structlog implementations of the tool-side observer ports."""

from typing import Protocol

import structlog


class WebSearchObserver(Protocol):
    def web_search_completed(self, query: str, result_count: int) -> None: ...

    def web_search_failed(self, query: str, reason: str) -> None: ...

    def web_search_rate_limited(self, query: str) -> None: ...

    def web_search_unconfigured(self) -> None: ...


class StructlogToolObserver:
    """Delegates tool dispatch events to structlog.

    Satisfies the ToolObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def tool_failed(self, tool: str, reason: str) -> None:
        self._log.error("tool.failed", tool=tool, reason=reason)

    def escalation_blocked(
        self, channel: str, prior_tool_calls: int, required_tool_calls: int
    ) -> None:
        self._log.info(
            "tool.escalation_blocked",
            channel=channel,
            prior_tool_calls=prior_tool_calls,
            required_tool_calls=required_tool_calls,
        )

    def escalation_approved(self, channel: str, reason: str) -> None:
        self._log.info("tool.escalation_approved", channel=channel, reason=reason)


class StructlogWebSearchObserver:
    """Satisfies the WebSearchObserver protocol structurally."""

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def web_search_completed(self, query: str, result_count: int) -> None:
        self._log.debug("web_search.completed", query=query, result_count=result_count)

    def web_search_failed(self, query: str, reason: str) -> None:
        self._log.error("web_search.failed", query=query, reason=reason)

    def web_search_rate_limited(self, query: str) -> None:
        self._log.warning("web_search.rate_limited", query=query)

    def web_search_unconfigured(self) -> None:
        self._log.warning("web_search.unconfigured")
