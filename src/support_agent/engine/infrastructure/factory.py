"""Wires an AgenticSolver from settings and the support collaborators."""

from support_agent.completion.domain.client import CompletionProviders
from support_agent.config.domain.settings import SupportAgentSettings
from support_agent.engine.application.pacing import Pacer
from support_agent.engine.application.solver import AgenticSolver
from support_agent.engine.domain.observer import AgentObserver
from support_agent.tools.application.dispatcher import ToolDispatcher
from support_agent.tools.domain.collaborators import (
    KnowledgeSearch,
    SupportStore,
    WebSearch,
)
from support_agent.tools.domain.escalation import EscalationGate
from support_agent.tools.domain.observer import ToolObserver


def create_solver(
    settings: SupportAgentSettings,
    providers: CompletionProviders,
    knowledge: KnowledgeSearch,
    store: SupportStore,
    agent_observer: AgentObserver,
    tool_observer: ToolObserver,
    web_search: WebSearch | None = None,
) -> AgenticSolver:
    dispatcher = ToolDispatcher(
        knowledge=knowledge,
        store=store,
        gate=EscalationGate(policy=settings.escalation),
        observer=tool_observer,
        web_search=web_search,
        max_web_searches=settings.agent.max_web_searches,
    )
    return AgenticSolver(
        config=settings.agent,
        providers=providers,
        dispatcher=dispatcher,
        observer=agent_observer,
        pacer=Pacer(config=settings.pacing),
    )
