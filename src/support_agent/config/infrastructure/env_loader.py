"""Environment-variable settings loader with documented defaults."""

import os
from collections.abc import Mapping

from pydantic import ValidationError

from support_agent.config.domain.agent import AgentConfig
from support_agent.config.domain.observer import ConfigObserver
from support_agent.config.domain.provider import ProviderConfig, WebSearchConfig
from support_agent.config.domain.settings import SupportAgentSettings
from support_agent.config.infrastructure.errors import ConfigValidationError

_SOURCE = "environment"


class EnvSettingsLoader:
    """Builds SupportAgentSettings from AI_AGENT_* and provider key variables.

    Unset variables fall back to the AgentConfig defaults. The engine is
    enabled unless AI_AGENT_ENABLED is exactly "false".
    """

    def __init__(
        self,
        observer: ConfigObserver,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._observer = observer
        self._environ = environ if environ is not None else os.environ

    def load(self) -> SupportAgentSettings:
        """
        Raises:
            ConfigValidationError: if a numeric variable is not an integer or a
                value is out of range.
        """
        env = self._environ
        defaults = AgentConfig()
        try:
            agent = AgentConfig(
                enabled=env.get("AI_AGENT_ENABLED") != "false",
                max_tool_rounds=_int_var(
                    env, "AI_AGENT_MAX_TOOL_ROUNDS", defaults.max_tool_rounds
                ),
                max_total_tools=_int_var(
                    env, "AI_AGENT_MAX_TOTAL_TOOLS", defaults.max_total_tools
                ),
                model=env.get("AI_AGENT_MODEL") or defaults.model,
                timeout_ms=_int_var(env, "AI_AGENT_TIMEOUT_MS", defaults.timeout_ms),
            )
        except ValidationError as exc:
            raise ConfigValidationError(str(exc)) from exc

        settings = SupportAgentSettings(
            agent=agent,
            provider=ProviderConfig(
                primary_api_key=env.get("ANTHROPIC_API_KEY_1") or None,
                fallback_api_key=env.get("ANTHROPIC_API_KEY_2") or None,
            ),
            web_search=WebSearchConfig(api_key=env.get("BRAVE_SEARCH_API_KEY") or None),
        )
        if settings.provider.fallback_api_key is None:
            self._observer.config_fallback_provider_missing(source=_SOURCE)
        self._observer.config_loaded(
            source=_SOURCE, model=agent.model, enabled=agent.enabled
        )
        return settings


def _int_var(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw, 10)
    except ValueError as exc:
        raise ConfigValidationError(f"{name} must be an integer, got {raw!r}") from exc
