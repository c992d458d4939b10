"""Shared builders for AgenticSolver tests."""

import random
from collections.abc import Callable
from unittest.mock import MagicMock

from support_agent.completion.domain.client import CompletionClient, CompletionProviders
from support_agent.config.domain.agent import AgentConfig, PacingConfig
from support_agent.config.domain.channel import Channel
from support_agent.config.domain.escalation import EscalationPolicy
from support_agent.engine.application.pacing import Pacer
from support_agent.engine.application.solver import AgenticSolver
from support_agent.engine.domain.input import (
    AgentInput,
    CustomerRef,
    PriorTurn,
    TicketRef,
)
from support_agent.tools.application.dispatcher import ToolDispatcher
from support_agent.tools.domain.collaborators import (
    CustomerProfile,
    KnowledgeArticle,
    TicketMessage,
    WebResult,
)
from support_agent.tools.domain.escalation import EscalationGate
from tests.engine.fake_observer import FakeAgentObserver
from tests.tools.fake_collaborators import (
    FakeKnowledgeSearch,
    FakeSupportStore,
    FakeWebSearch,
)
from tests.tools.fake_observer import FakeToolObserver

ACOMPLETION = "support_agent.completion.infrastructure.litellm_client.litellm.acompletion"

RECORDING_ARTICLE = KnowledgeArticle(
    id="kb-recording-01",
    title="Enabling cloud recording",
    content="Open Settings, choose Recording, and switch on cloud recording.",
    similarity=0.91,
    source_file="recordings.md",
)


async def no_sleep(_seconds: float) -> None:
    return None


def malformed_tool_call_response() -> MagicMock:
    """A provider response whose only tool call carries no id."""
    tool_call = MagicMock()
    tool_call.id = None
    tool_call.function.name = "search_knowledge_base"
    tool_call.function.arguments = "{}"
    choice = MagicMock()
    choice.message.content = None
    choice.message.tool_calls = [tool_call]
    choice.finish_reason = "tool_calls"
    response = MagicMock()
    response.choices = [choice]
    response.usage.prompt_tokens = 10
    response.usage.completion_tokens = 5
    return response


def make_input(
    message: str = "How do I enable recording?",
    channel: Channel = Channel.WIDGET,
    previous: tuple[PriorTurn, ...] = (),
) -> AgentInput:
    return AgentInput(
        message=message,
        ticket=TicketRef(id="tkt-100", subject="Recording", status="open"),
        customer=CustomerRef(id="cust-1", name="Dana"),
        channel=channel,
        previous_messages=previous,
    )


def make_knowledge() -> FakeKnowledgeSearch:
    return FakeKnowledgeSearch(articles=[RECORDING_ARTICLE])


def make_store() -> FakeSupportStore:
    return FakeSupportStore(
        customers=[CustomerProfile(id="cust-1", name="Dana")],
        messages={
            "tkt-100": [TicketMessage(sender_type="customer", content="Hello?")]
        },
    )


def make_web() -> FakeWebSearch:
    return FakeWebSearch(
        results=[WebResult(title="Docs", url="https://example.com", description="d")]
    )


def make_solver(
    primary: CompletionClient,
    fallback: CompletionClient | None = None,
    config: AgentConfig | None = None,
    knowledge: FakeKnowledgeSearch | None = None,
    web: FakeWebSearch | None = None,
    policy: EscalationPolicy | None = None,
    clock: Callable[[], float] | None = None,
    observer: FakeAgentObserver | None = None,
) -> tuple[AgenticSolver, FakeAgentObserver]:
    obs = observer if observer is not None else FakeAgentObserver()
    cfg = config if config is not None else AgentConfig()
    dispatcher = ToolDispatcher(
        knowledge=knowledge if knowledge is not None else make_knowledge(),
        store=make_store(),
        gate=EscalationGate(policy=policy if policy is not None else EscalationPolicy()),
        observer=FakeToolObserver(),
        web_search=web,
        max_web_searches=cfg.max_web_searches,
    )
    kwargs = {} if clock is None else {"clock": clock}
    solver = AgenticSolver(
        config=cfg,
        providers=CompletionProviders(primary=primary, fallback=fallback),
        dispatcher=dispatcher,
        observer=obs,
        pacer=Pacer(PacingConfig(), sleep=no_sleep, rng=random.Random(7)),
        **kwargs,
    )
    return solver, obs
