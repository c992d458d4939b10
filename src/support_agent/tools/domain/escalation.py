"""EscalationGate — pure policy deciding whether a hand-off to a human is allowed."""

from pydantic import BaseModel

from support_agent.config.domain.channel import Channel
from support_agent.config.domain.escalation import EscalationPolicy


class EscalationDecision(BaseModel, frozen=True):
    approved: bool
    prior_tool_calls: int
    required_tool_calls: int


class EscalationGate:
    """Rejects escalation until the channel's minimum number of prior tool calls is met."""

    def __init__(self, policy: EscalationPolicy) -> None:
        self._policy = policy

    def evaluate(self, channel: Channel, prior_tool_calls: int) -> EscalationDecision:
        required = self._policy.threshold_for(channel)
        return EscalationDecision(
            approved=prior_tool_calls >= required,
            prior_tool_calls=prior_tool_calls,
            required_tool_calls=required,
        )
