"""SupportAgentSettings aggregate — the root configuration object."""

from pydantic import BaseModel, Field

from support_agent.config.domain.agent import AgentConfig, PacingConfig
from support_agent.config.domain.escalation import EscalationPolicy
from support_agent.config.domain.provider import (
    CostRates,
    ProviderConfig,
    WebSearchConfig,
)


class SupportAgentSettings(BaseModel, frozen=True):
    """Root configuration aggregate for the support agent."""

    agent: AgentConfig = Field(default_factory=AgentConfig)
    escalation: EscalationPolicy = Field(default_factory=EscalationPolicy)
    pacing: PacingConfig = Field(default_factory=PacingConfig)
    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    web_search: WebSearchConfig = Field(default_factory=WebSearchConfig)
    cost: CostRates = Field(default_factory=CostRates)
    triage_model: str = Field(
        default="anthropic/claude-haiku-4-5-20251001", min_length=1
    )
