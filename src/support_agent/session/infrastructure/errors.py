"""Error types raised by session infrastructure."""

from pathlib import Path

from support_agent.core.errors import SupportAgentError


class SessionWriteError(SupportAgentError):
    """Raised when a session record cannot be appended to its log file."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to record session to '{path}': {reason}")
