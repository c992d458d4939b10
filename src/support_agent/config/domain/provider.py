"""Completion provider and web search credential models."""

from pydantic import BaseModel, Field


class ProviderConfig(BaseModel, frozen=True):
    """Primary and optional fallback credentials for the completion service."""

    primary_api_key: str | None = None
    fallback_api_key: str | None = None
    api_base: str | None = None


class WebSearchConfig(BaseModel, frozen=True):
    api_key: str | None = None
    endpoint: str = "https://api.search.brave.com/res/v1/web/search"
    timeout_seconds: float = Field(default=8.0, gt=0.0)
    max_results: int = Field(default=5, ge=1)
    cache_max_entries: int = Field(default=100, ge=1)
    cache_ttl_seconds: float = Field(default=300.0, ge=0.0)
    rate_per_second: float = Field(default=1.0, gt=0.0)
    burst: int = Field(default=5, ge=1)


class CostRates(BaseModel, frozen=True):
    """USD price per million tokens, used for session cost estimation."""

    input_per_million: float = Field(default=3.0, ge=0.0)
    output_per_million: float = Field(default=15.0, ge=0.0)
