"""SessionRecorder port — where AgentSession records are persisted."""

from typing import Protocol

from support_agent.session.domain.session import AgentSession


class SessionRecorder(Protocol):
    def record(self, session: AgentSession) -> None: ...
