"""Structlog implementation of the TriageObserver port."""

import structlog


class StructlogTriageObserver:
    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def classification_completed(self, priority: str) -> None:
        self._log.info("triage.classified", priority=str(priority))

    def classification_failed(self, reason: str) -> None:
        self._log.warning(
            "triage.classification_failed", reason=reason, fallback="normal"
        )
