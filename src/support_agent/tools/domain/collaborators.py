"""Collaborator ports and records — knowledge search, web search, and the support store."""

from typing import Protocol

from pydantic import BaseModel


class KnowledgeArticle(BaseModel, frozen=True):
    id: str
    title: str
    content: str
    similarity: float = 0.0
    source_file: str | None = None
    section_path: str | None = None


class WebResult(BaseModel, frozen=True):
    title: str
    url: str
    description: str = ""


class CustomerProfile(BaseModel, frozen=True):
    id: str
    name: str | None = None
    email: str | None = None
    phone_number: str | None = None
    preferred_language: str = "en"
    preferred_channel: str = "email"
    created_at: str = ""


class TicketSummary(BaseModel, frozen=True):
    id: str
    subject: str
    status: str
    priority: str
    source_channel: str
    created_at: str = ""


class TicketMessage(BaseModel, frozen=True):
    sender_type: str
    content: str
    created_at: str = ""


class KnowledgeSearch(Protocol):
    """Ranked knowledge-base excerpts. Returns [] when nothing matches."""

    async def search(self, query: str, limit: int) -> list[KnowledgeArticle]: ...


class WebSearch(Protocol):
    """Ranked web results. Returns [] when unconfigured or nothing matches."""

    async def search(self, query: str, limit: int) -> list[WebResult]: ...


class SupportStore(Protocol):
    """Read access to customers, their tickets, and ticket transcripts."""

    async def get_customer(self, customer_id: str) -> CustomerProfile | None: ...

    async def recent_tickets(
        self, customer_id: str, limit: int
    ) -> list[TicketSummary]: ...

    async def ticket_messages(self, ticket_id: str, limit: int) -> list[TicketMessage]: ...
