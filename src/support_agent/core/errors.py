"""Base exception class for all support-agent-specific errors."""


class SupportAgentError(Exception):
    """Base class for all support-agent errors."""

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable
