"""Escalation policy — per-channel minimum effort before a human hand-off."""

from pydantic import BaseModel, Field

from support_agent.config.domain.channel import Channel


def _default_thresholds() -> dict[Channel, int]:
    return {Channel.WIDGET: 4, Channel.PORTAL: 4, Channel.EMAIL: 3}


class EscalationPolicy(BaseModel, frozen=True):
    """Minimum number of prior tool calls required before escalation is allowed.

    Chat-like channels demand the most effort, asynchronous channels an
    intermediate amount, everything else the baseline.
    """

    min_tool_calls: dict[Channel, int] = Field(default_factory=_default_thresholds)
    default_min_tool_calls: int = Field(default=2, ge=0)

    def threshold_for(self, channel: Channel) -> int:
        return self.min_tool_calls.get(channel, self.default_min_tool_calls)
