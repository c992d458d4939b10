"""Structlog implementation of the SessionObserver port."""

import structlog


class StructlogSessionObserver:
    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def session_recorded(
        self, ticket_id: str, result_type: str, estimated_cost_usd: float
    ) -> None:
        self._log.info(
            "session.recorded",
            ticket_id=ticket_id,
            result_type=result_type,
            estimated_cost_usd=estimated_cost_usd,
        )
