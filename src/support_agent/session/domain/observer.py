"""SessionObserver port — domain events emitted while persisting sessions."""

from typing import Protocol


class SessionObserver(Protocol):
    def session_recorded(
        self, ticket_id: str, result_type: str, estimated_cost_usd: float
    ) -> None: ...
