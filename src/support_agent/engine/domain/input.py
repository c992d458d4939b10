"""AgentInput — the immutable request for one run of the orchestration loop."""

from typing import Literal

from pydantic import BaseModel

from support_agent.config.domain.channel import Channel


class TicketRef(BaseModel, frozen=True):
    id: str
    subject: str
    status: str = "open"
    priority: str = "normal"


class CustomerRef(BaseModel, frozen=True):
    id: str
    name: str | None = None


class PriorTurn(BaseModel, frozen=True):
    """One earlier message on the ticket, used as conversation context."""

    role: Literal["customer", "assistant"]
    content: str


class AgentInput(BaseModel, frozen=True):
    message: str
    ticket: TicketRef
    customer: CustomerRef
    channel: Channel
    previous_messages: tuple[PriorTurn, ...] = ()
