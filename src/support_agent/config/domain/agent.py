"""Agent configuration models."""

from pydantic import BaseModel, Field


class AgentConfig(BaseModel, frozen=True):
    """Budgets and model selection for the orchestration loop."""

    enabled: bool = True
    max_tool_rounds: int = Field(default=8, ge=1)
    max_total_tools: int = Field(default=15, ge=0)
    model: str = Field(default="anthropic/claude-sonnet-4-20250514", min_length=1)
    timeout_ms: int = Field(default=30_000, ge=0)
    max_web_searches: int = Field(default=3, ge=0, le=3)


class PacingConfig(BaseModel, frozen=True):
    """Reveal pace for pre-fetched answer text in incremental mode."""

    chunk_size: int = Field(default=4, ge=1)
    base_delay_ms: int = Field(default=18, ge=0)
    jitter_ms: int = Field(default=5, ge=0)
