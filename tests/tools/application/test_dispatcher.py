"""Tests for ToolDispatcher."""

import json

import pytest

from support_agent.config.domain.channel import Channel
from support_agent.config.domain.escalation import EscalationPolicy
from support_agent.tools.application.dispatcher import ToolDispatcher
from support_agent.tools.domain.collaborators import (
    CustomerProfile,
    KnowledgeArticle,
    TicketMessage,
    TicketSummary,
    WebResult,
)
from support_agent.tools.domain.escalation import EscalationGate
from support_agent.tools.domain.tool import ToolContext
from tests.tools.fake_collaborators import (
    FakeKnowledgeSearch,
    FakeSupportStore,
    FakeWebSearch,
)
from tests.tools.fake_observer import FakeToolObserver


def _context(
    channel: Channel = Channel.WIDGET,
    prior_tool_calls: int = 0,
    web_searches_used: int = 0,
) -> ToolContext:
    return ToolContext(
        ticket_id="tkt-1",
        customer_id="cust-1",
        channel=channel,
        prior_tool_calls=prior_tool_calls,
        web_searches_used=web_searches_used,
    )


def _article(i: int, content: str = "Recording guide") -> KnowledgeArticle:
    return KnowledgeArticle(
        id=f"kb-{i}", title=f"Recording {i}", content=content, similarity=0.8
    )


def _dispatcher(
    knowledge: FakeKnowledgeSearch | None = None,
    store: FakeSupportStore | None = None,
    web: FakeWebSearch | None = None,
    observer: FakeToolObserver | None = None,
) -> ToolDispatcher:
    return ToolDispatcher(
        knowledge=knowledge if knowledge is not None else FakeKnowledgeSearch(),
        store=store if store is not None else FakeSupportStore(),
        gate=EscalationGate(EscalationPolicy()),
        observer=observer if observer is not None else FakeToolObserver(),
        web_search=web,
    )


class TestSearchKnowledgeBase:
    async def test_found_articles_are_formatted_with_ids(self) -> None:
        dispatcher = _dispatcher(knowledge=FakeKnowledgeSearch([_article(1)]))

        outcome = await dispatcher.dispatch(
            "search_knowledge_base", {"query": "recording"}, _context()
        )

        assert outcome.success is True
        assert outcome.article_ids == ("kb-1",)
        assert "ID: kb-1" in outcome.text
        assert outcome.log.tool == "search_knowledge_base"
        assert outcome.log.input == {"query": "recording"}
        assert outcome.log.output_summary == "Found 1 KB articles (top similarity: 0.80)"

    async def test_results_are_capped_at_five(self) -> None:
        articles = [_article(i) for i in range(8)]
        dispatcher = _dispatcher(knowledge=FakeKnowledgeSearch(articles))

        outcome = await dispatcher.dispatch(
            "search_knowledge_base", {"query": "recording"}, _context()
        )

        assert len(outcome.article_ids) == 5

    async def test_long_excerpts_are_truncated(self) -> None:
        dispatcher = _dispatcher(
            knowledge=FakeKnowledgeSearch([_article(1, content="recording " * 1000)])
        )

        outcome = await dispatcher.dispatch(
            "search_knowledge_base", {"query": "recording"}, _context()
        )

        assert len(outcome.text) < 2300

    async def test_no_results_asks_for_a_rephrase(self) -> None:
        dispatcher = _dispatcher()

        outcome = await dispatcher.dispatch(
            "search_knowledge_base", {"query": "nothing"}, _context()
        )

        assert outcome.success is False
        assert outcome.text.startswith("No knowledge base articles found")
        assert outcome.article_ids == ()

    async def test_missing_query_is_reported(self) -> None:
        outcome = await _dispatcher().dispatch("search_knowledge_base", {}, _context())

        assert outcome.success is False
        assert "query" in outcome.text


class TestSearchWeb:
    async def test_results_are_formatted_and_counted(self) -> None:
        web = FakeWebSearch([WebResult(title="Guide", url="https://e.com", description="d")])
        dispatcher = _dispatcher(web=web)

        outcome = await dispatcher.dispatch("search_web", {"query": "q"}, _context())

        assert outcome.web_search_performed is True
        assert "**Guide**" in outcome.text
        assert web.queries == ["q"]

    async def test_fourth_search_is_refused_without_executing(self) -> None:
        web = FakeWebSearch([WebResult(title="Guide", url="https://e.com")])
        dispatcher = _dispatcher(web=web)

        outcome = await dispatcher.dispatch(
            "search_web", {"query": "q"}, _context(web_searches_used=3)
        )

        assert outcome.text == (
            "Maximum web searches (3) reached. Please synthesize what you have."
        )
        assert outcome.web_search_performed is False
        assert web.queries == []

    async def test_unconfigured_web_search_is_reported(self) -> None:
        outcome = await _dispatcher().dispatch("search_web", {"query": "q"}, _context())

        assert outcome.success is False
        assert outcome.text.startswith("Web search is not configured")
        assert outcome.web_search_performed is False

    async def test_empty_results_still_count_as_a_search(self) -> None:
        dispatcher = _dispatcher(web=FakeWebSearch([]))

        outcome = await dispatcher.dispatch("search_web", {"query": "q"}, _context())

        assert outcome.success is False
        assert outcome.web_search_performed is True


class TestCustomerAndTicket:
    async def test_customer_context_uses_run_customer_by_default(self) -> None:
        store = FakeSupportStore(
            customers=[CustomerProfile(id="cust-1", name="Dana", email="d@e.com")],
            tickets={
                "cust-1": [
                    TicketSummary(
                        id="t1",
                        subject="Billing",
                        status="resolved",
                        priority="high",
                        source_channel="email",
                    )
                ]
            },
        )

        outcome = await _dispatcher(store=store).dispatch(
            "get_customer_context", {}, _context()
        )

        assert "- Name: Dana" in outcome.text
        assert "- [resolved] Billing (high, via email)" in outcome.text
        assert outcome.log.output_summary == "Customer found, 1 recent tickets"

    async def test_unknown_customer(self) -> None:
        outcome = await _dispatcher().dispatch(
            "get_customer_context", {"customer_id": "ghost"}, _context()
        )

        assert outcome.text == "Customer not found."
        assert outcome.success is False

    async def test_ticket_transcript(self) -> None:
        store = FakeSupportStore(
            messages={
                "tkt-1": [
                    TicketMessage(sender_type="customer", content="Camera broken"),
                    TicketMessage(sender_type="agent", content="Try again"),
                ]
            }
        )

        outcome = await _dispatcher(store=store).dispatch(
            "get_ticket_messages", {}, _context()
        )

        assert outcome.text == "[customer] Camera broken\n\n[agent] Try again"

    async def test_empty_transcript(self) -> None:
        outcome = await _dispatcher().dispatch(
            "get_ticket_messages", {"ticket_id": "none"}, _context()
        )

        assert outcome.text == "No messages found in this ticket."


class TestEscalateToHuman:
    async def test_rejection_coaches_the_model(self) -> None:
        observer = FakeToolObserver()

        outcome = await _dispatcher(observer=observer).dispatch(
            "escalate_to_human",
            {"reason": "asked", "summary": "wants human"},
            _context(channel=Channel.WIDGET, prior_tool_calls=1),
        )

        assert outcome.escalation is None
        assert outcome.success is False
        assert "You've only used 1 tools (minimum: 4)" in outcome.text
        assert "search_knowledge_base" in outcome.text
        assert observer.blocked[0].required_tool_calls == 4

    async def test_approval_returns_a_parseable_payload(self) -> None:
        observer = FakeToolObserver()

        outcome = await _dispatcher(observer=observer).dispatch(
            "escalate_to_human",
            {"reason": "legal threat", "summary": "Customer mentions a lawyer"},
            _context(channel=Channel.EMAIL, prior_tool_calls=3),
        )

        assert outcome.escalation is not None
        assert json.loads(outcome.text) == {
            "escalated": True,
            "reason": "legal threat",
            "summary": "Customer mentions a lawyer",
        }
        assert outcome.log.output_summary == "Escalated: legal threat"
        assert observer.approved == [(Channel.EMAIL, "legal threat")]


class TestFailures:
    async def test_collaborator_exception_becomes_text(self) -> None:
        observer = FakeToolObserver()
        dispatcher = _dispatcher(
            knowledge=FakeKnowledgeSearch(error=ConnectionError("db down")),
            observer=observer,
        )

        outcome = await dispatcher.dispatch(
            "search_knowledge_base", {"query": "q"}, _context()
        )

        assert outcome.success is False
        assert outcome.text.startswith("Tool error: db down")
        assert outcome.log.output_summary == "Tool error: ConnectionError"
        assert observer.failed == [("search_knowledge_base", "db down")]

    async def test_unknown_tool(self) -> None:
        outcome = await _dispatcher().dispatch("teleport", {}, _context())

        assert outcome.text == "Unknown tool: teleport"
        assert outcome.log.tool == "teleport"

    @pytest.mark.parametrize(
        "name",
        ["search_knowledge_base", "search_web", "get_customer_context", "get_ticket_messages"],
    )
    async def test_every_dispatch_produces_a_log(self, name: str) -> None:
        outcome = await _dispatcher().dispatch(name, {"query": "q"}, _context())

        assert outcome.log.tool == name
        assert outcome.log.duration_ms >= 0
