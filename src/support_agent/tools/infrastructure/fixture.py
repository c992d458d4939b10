"""YAML-backed collaborators — a local stand-in for the ticket store and knowledge base."""

import re
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from support_agent.config.domain.channel import Channel
from support_agent.tools.domain.collaborators import (
    CustomerProfile,
    KnowledgeArticle,
    TicketMessage,
    TicketSummary,
)
from support_agent.tools.infrastructure.errors import FixtureLoadError

_WORD_PATTERN = re.compile(r"[a-z0-9]+")


class FixtureTicket(BaseModel, frozen=True):
    id: str
    customer_id: str
    subject: str
    status: str = "open"
    priority: str = "normal"
    source_channel: Channel = Channel.WIDGET
    created_at: str = ""
    messages: list[TicketMessage] = Field(default_factory=list)


class FixtureArticle(BaseModel, frozen=True):
    id: str
    title: str
    content: str
    source_file: str | None = None
    section_path: str | None = None


class SupportFixture(BaseModel, frozen=True):
    """Customers, tickets (with transcripts), and knowledge articles."""

    customers: list[CustomerProfile] = Field(default_factory=list)
    tickets: list[FixtureTicket] = Field(default_factory=list)
    articles: list[FixtureArticle] = Field(default_factory=list)


def load_fixture(path: Path) -> SupportFixture:
    """
    Raises:
        FixtureLoadError: if the file is missing, not YAML, or fails validation.
    """
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except FileNotFoundError as exc:
        raise FixtureLoadError(reason=f"file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise FixtureLoadError(reason=f"invalid YAML: {exc}") from exc

    try:
        return SupportFixture.model_validate(raw or {})
    except ValidationError as exc:
        raise FixtureLoadError(reason=str(exc)) from exc


class FixtureSupportStore:
    """SupportStore over a SupportFixture. Tickets are returned newest first."""

    def __init__(self, fixture: SupportFixture) -> None:
        self._customers = {c.id: c for c in fixture.customers}
        self._tickets = list(fixture.tickets)

    async def get_customer(self, customer_id: str) -> CustomerProfile | None:
        return self._customers.get(customer_id)

    async def recent_tickets(self, customer_id: str, limit: int) -> list[TicketSummary]:
        owned = [t for t in self._tickets if t.customer_id == customer_id]
        owned.sort(key=lambda t: t.created_at, reverse=True)
        return [
            TicketSummary(
                id=t.id,
                subject=t.subject,
                status=t.status,
                priority=t.priority,
                source_channel=str(t.source_channel),
                created_at=t.created_at,
            )
            for t in owned[:limit]
        ]

    async def ticket_messages(self, ticket_id: str, limit: int) -> list[TicketMessage]:
        for ticket in self._tickets:
            if ticket.id == ticket_id:
                ordered = sorted(ticket.messages, key=lambda m: m.created_at)
                return ordered[:limit]
        return []


class FixtureKnowledgeSearch:
    """KnowledgeSearch ranking articles by query-term overlap.

    similarity is the share of distinct query terms found in the article's
    title or content. Articles with no overlap are not returned.
    """

    def __init__(self, fixture: SupportFixture) -> None:
        self._articles = list(fixture.articles)

    async def search(self, query: str, limit: int) -> list[KnowledgeArticle]:
        terms = set(_WORD_PATTERN.findall(query.lower()))
        if not terms:
            return []

        scored: list[tuple[float, FixtureArticle]] = []
        for article in self._articles:
            words = set(_WORD_PATTERN.findall(f"{article.title} {article.content}".lower()))
            overlap = len(terms & words) / len(terms)
            if overlap > 0:
                scored.append((overlap, article))

        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [
            KnowledgeArticle(
                id=article.id,
                title=article.title,
                content=article.content,
                similarity=score,
                source_file=article.source_file,
                section_path=article.section_path,
            )
            for score, article in scored[:limit]
        ]
