"""TriageObserver port — domain events emitted during priority classification."""

from typing import Protocol


class TriageObserver(Protocol):
    def classification_completed(self, priority: str) -> None: ...

    def classification_failed(self, reason: str) -> None: ...
