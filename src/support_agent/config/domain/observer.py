"""ConfigObserver port — domain events emitted while loading configuration."""

from typing import Protocol


class ConfigObserver(Protocol):
    def config_loaded(self, source: str, model: str, enabled: bool) -> None: ...

    def config_fallback_provider_missing(self, source: str) -> None: ...
