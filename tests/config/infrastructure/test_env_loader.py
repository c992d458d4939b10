"""Tests for the environment-variable settings loader."""

import pytest

from support_agent.config.infrastructure.env_loader import EnvSettingsLoader
from support_agent.config.infrastructure.errors import ConfigValidationError
from tests.config.fake_observer import FakeConfigObserver


def _load(environ: dict[str, str]):
    observer = FakeConfigObserver()
    settings = EnvSettingsLoader(observer, environ=environ).load()
    return settings, observer


class TestDefaults:
    """An empty environment yields the documented defaults."""

    def test_agent_defaults(self) -> None:
        settings, _ = _load({})

        assert settings.agent.enabled is True
        assert settings.agent.max_tool_rounds == 8
        assert settings.agent.max_total_tools == 15
        assert settings.agent.model == "anthropic/claude-sonnet-4-20250514"
        assert settings.agent.timeout_ms == 30000

    def test_missing_fallback_is_reported(self) -> None:
        _, observer = _load({"ANTHROPIC_API_KEY_1": "k1"})

        assert observer.fallback_missing == ["environment"]


class TestOverrides:
    def test_numeric_and_model_overrides(self) -> None:
        settings, _ = _load(
            {
                "AI_AGENT_MAX_TOOL_ROUNDS": "3",
                "AI_AGENT_MAX_TOTAL_TOOLS": "7",
                "AI_AGENT_TIMEOUT_MS": "5000",
                "AI_AGENT_MODEL": "anthropic/claude-haiku-4-5-20251001",
            }
        )

        assert settings.agent.max_tool_rounds == 3
        assert settings.agent.max_total_tools == 7
        assert settings.agent.timeout_ms == 5000
        assert settings.agent.model == "anthropic/claude-haiku-4-5-20251001"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("false", False), ("true", True), ("0", True), ("FALSE", True)],
    )
    def test_only_literal_false_disables(self, raw: str, expected: bool) -> None:
        settings, observer = _load({"AI_AGENT_ENABLED": raw})

        assert settings.agent.enabled is expected
        assert observer.loaded[0][2] is expected

    def test_credentials(self) -> None:
        settings, observer = _load(
            {
                "ANTHROPIC_API_KEY_1": "k1",
                "ANTHROPIC_API_KEY_2": "k2",
                "BRAVE_SEARCH_API_KEY": "b",
            }
        )

        assert settings.provider.primary_api_key == "k1"
        assert settings.provider.fallback_api_key == "k2"
        assert settings.web_search.api_key == "b"
        assert observer.fallback_missing == []


class TestInvalidValues:
    def test_non_integer(self) -> None:
        with pytest.raises(ConfigValidationError, match="AI_AGENT_MAX_TOOL_ROUNDS"):
            _load({"AI_AGENT_MAX_TOOL_ROUNDS": "many"})

    def test_out_of_range(self) -> None:
        with pytest.raises(ConfigValidationError):
            _load({"AI_AGENT_MAX_TOOL_ROUNDS": "0"})
