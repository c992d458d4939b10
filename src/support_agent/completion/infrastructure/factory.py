"""Builds the primary/fallback completion client pair from provider settings."""

from support_agent.completion.domain.client import CompletionProviders
from support_agent.completion.infrastructure.litellm_client import LiteLLMCompletionClient
from support_agent.config.domain.provider import ProviderConfig


def create_providers(config: ProviderConfig) -> CompletionProviders:
    """The fallback client exists only when a second credential is configured."""
    primary = LiteLLMCompletionClient(
        api_key=config.primary_api_key, api_base=config.api_base
    )
    fallback = None
    if config.fallback_api_key:
        fallback = LiteLLMCompletionClient(
            api_key=config.fallback_api_key, api_base=config.api_base
        )
    return CompletionProviders(primary=primary, fallback=fallback)
