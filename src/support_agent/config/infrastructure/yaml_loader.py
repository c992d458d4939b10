"""YAML settings loader — parses, interpolates env vars, validates, and emits observer events."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from support_agent.config.domain.observer import ConfigObserver
from support_agent.config.domain.settings import SupportAgentSettings
from support_agent.config.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)
from support_agent.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)


class YamlSettingsLoader:
    """Loads, interpolates, validates, and returns SupportAgentSettings from a YAML file."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> SupportAgentSettings:
        """
        Load, interpolate, validate, and return settings from a YAML file.

        Raises:
            ConfigLoadError: if the file does not exist.
            MissingEnvVarsError: if any ${ENV_VAR} references are unset (all collected first).
            ConfigValidationError: if the document is not a mapping or the schema is violated.
            ConfigValidationError: if the file is not valid YAML.
        """
        raw = _parse_yaml(path=path)
        _check_missing_env_vars(raw=raw)
        settings = _build_settings(raw=interpolate(raw))
        source = str(path)
        if settings.provider.fallback_api_key is None:
            self._observer.config_fallback_provider_missing(source=source)
        self._observer.config_loaded(
            source=source,
            model=settings.agent.model,
            enabled=settings.agent.enabled,
        )
        return settings


def _parse_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            return yaml.safe_load(fh)
    except FileNotFoundError as exc:
        raise ConfigLoadError(path=path) from exc
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"invalid YAML: {exc}") from exc


def _check_missing_env_vars(raw: Any) -> None:
    """Raise MissingEnvVarsError if any ${ENV_VAR} references in raw are unset."""
    missing = collect_missing_vars(raw)
    if missing:
        raise MissingEnvVarsError(missing)


def _build_settings(raw: Any) -> SupportAgentSettings:
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigValidationError("top-level document must be a mapping")
    try:
        return SupportAgentSettings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc
