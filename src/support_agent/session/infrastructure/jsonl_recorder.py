"""JsonlSessionRecorder — appends one JSON line per AgentSession."""

from pathlib import Path

from support_agent.session.domain.observer import SessionObserver
from support_agent.session.domain.session import AgentSession
from support_agent.session.infrastructure.errors import SessionWriteError


class JsonlSessionRecorder:
    """Satisfies the SessionRecorder protocol structurally.

    The parent directory is created on first write.
    """

    def __init__(self, path: Path, observer: SessionObserver) -> None:
        self._path = path
        self._observer = observer

    def record(self, session: AgentSession) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as f:
                f.write(session.model_dump_json() + "\n")
        except OSError as exc:
            raise SessionWriteError(path=self._path, reason=str(exc)) from exc

        self._observer.session_recorded(
            ticket_id=session.ticket_id,
            result_type=session.result_type,
            estimated_cost_usd=session.estimated_cost_usd,
        )
