"""Tests for settings domain models."""

import pytest
from pydantic import ValidationError

from support_agent.config.domain.agent import AgentConfig, PacingConfig
from support_agent.config.domain.channel import Channel
from support_agent.config.domain.escalation import EscalationPolicy
from support_agent.config.domain.settings import SupportAgentSettings


class TestAgentConfig:
    """AgentConfig enforces budget bounds."""

    def test_defaults(self) -> None:
        config = AgentConfig()

        assert config.max_tool_rounds == 8
        assert config.max_total_tools == 15
        assert config.timeout_ms == 30000
        assert config.max_web_searches == 3

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_tool_rounds": 0},
            {"max_total_tools": -1},
            {"timeout_ms": -1},
            {"max_web_searches": 4},
            {"model": ""},
        ],
    )
    def test_rejects_out_of_range(self, kwargs: dict[str, object]) -> None:
        with pytest.raises(ValidationError):
            AgentConfig(**kwargs)

    def test_is_frozen(self) -> None:
        config = AgentConfig()

        with pytest.raises(ValidationError):
            config.max_tool_rounds = 2  # type: ignore[misc]


class TestPacingConfig:
    def test_chunk_size_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            PacingConfig(chunk_size=0)


class TestEscalationPolicy:
    def test_channel_keys_parse_from_strings(self) -> None:
        policy = EscalationPolicy.model_validate({"min_tool_calls": {"sms": 1}})

        assert policy.threshold_for(Channel.SMS) == 1
        assert policy.threshold_for(Channel.WIDGET) == 2

    def test_unknown_channel_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EscalationPolicy.model_validate({"min_tool_calls": {"fax": 1}})


def test_settings_default_every_section() -> None:
    settings = SupportAgentSettings()

    assert settings.provider.fallback_api_key is None
    assert settings.cost.input_per_million == 3.0
    assert settings.cost.output_per_million == 15.0
