"""Structlog implementation of the ConfigObserver port."""

import structlog


class StructlogConfigObserver:
    """Delegates config domain events to structlog.

    Satisfies the ConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_loaded(self, source: str, model: str, enabled: bool) -> None:
        self._log.info("config.loaded", source=source, model=model, enabled=enabled)

    def config_fallback_provider_missing(self, source: str) -> None:
        self._log.warning(
            "config.fallback_provider_missing",
            source=source,
            message="No fallback completion credential; rate limits will not be retried",
        )
