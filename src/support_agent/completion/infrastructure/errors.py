"""Error types raised by completion infrastructure."""

from support_agent.core.errors import SupportAgentError


class CompletionInvocationError(SupportAgentError):
    """Raised when the completion service cannot be invoked or returns an error."""

    def __init__(self, reason: str, retriable: bool = False) -> None:
        self.reason = reason
        super().__init__(f"Failed to complete request: {reason}", retriable=retriable)


class CompletionRateLimitedError(CompletionInvocationError):
    """Raised when the provider rejects a request as rate-limited or overloaded."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason=f"rate limited: {reason}", retriable=True)
