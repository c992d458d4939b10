"""Error types raised by tool infrastructure."""

from support_agent.core.errors import SupportAgentError


class FixtureLoadError(SupportAgentError):
    """Raised when a support fixture file cannot be read or fails validation."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to load support fixture: {reason}")
