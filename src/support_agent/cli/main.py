"""CLI entrypoint for support-agent — typer app with `ask` and `classify` commands."""

import asyncio
import sys
from pathlib import Path

import structlog
import typer
from rich.console import Console

from support_agent.cli.render import StreamRenderer, render_answer, render_summary
from support_agent.completion.infrastructure.factory import create_providers
from support_agent.config.domain.channel import Channel
from support_agent.config.domain.settings import SupportAgentSettings
from support_agent.config.infrastructure.env_loader import EnvSettingsLoader
from support_agent.config.infrastructure.observer import StructlogConfigObserver
from support_agent.config.infrastructure.yaml_loader import YamlSettingsLoader
from support_agent.core.errors import SupportAgentError
from support_agent.engine.domain.event import CompleteEvent, ErrorEvent
from support_agent.engine.domain.input import (
    AgentInput,
    CustomerRef,
    PriorTurn,
    TicketRef,
)
from support_agent.engine.domain.result import AgentResult
from support_agent.engine.infrastructure.factory import create_solver
from support_agent.engine.infrastructure.observer import StructlogAgentObserver
from support_agent.session.domain.recorder import SessionRecorder
from support_agent.session.domain.session import build_session
from support_agent.session.infrastructure.jsonl_recorder import JsonlSessionRecorder
from support_agent.session.infrastructure.observer import StructlogSessionObserver
from support_agent.tools.infrastructure.brave import BraveWebSearch
from support_agent.tools.infrastructure.errors import FixtureLoadError
from support_agent.tools.infrastructure.fixture import (
    FixtureKnowledgeSearch,
    FixtureSupportStore,
    SupportFixture,
    load_fixture,
)
from support_agent.tools.infrastructure.observer import (
    StructlogToolObserver,
    StructlogWebSearchObserver,
)
from support_agent.triage.application.classifier import PriorityClassifier
from support_agent.triage.infrastructure.observer import StructlogTriageObserver

app = typer.Typer(add_completion=False)


def _configure_structlog(log_format: str) -> None:
    """Configure structlog based on the requested format. Logs go to stderr."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _load_settings(config_path: Path | None) -> SupportAgentSettings:
    observer = StructlogConfigObserver()
    if config_path is None:
        return EnvSettingsLoader(observer=observer).load()
    return YamlSettingsLoader(observer=observer).load(path=config_path)


def _build_input(
    fixture: SupportFixture,
    ticket_id: str,
    message: str | None,
    channel: Channel | None,
) -> AgentInput:
    """Build an AgentInput from a fixture ticket.

    Without an explicit message, the ticket's latest customer message is the
    one answered and the earlier transcript becomes prior context.
    """
    ticket = next((t for t in fixture.tickets if t.id == ticket_id), None)
    if ticket is None:
        raise FixtureLoadError(reason=f"ticket '{ticket_id}' not found")
    customer = next((c for c in fixture.customers if c.id == ticket.customer_id), None)

    transcript = sorted(ticket.messages, key=lambda m: m.created_at)
    if message is None:
        customer_indexes = [
            i for i, m in enumerate(transcript) if m.sender_type == "customer"
        ]
        if not customer_indexes:
            raise FixtureLoadError(
                reason=f"ticket '{ticket_id}' has no customer message; pass --message"
            )
        latest = customer_indexes[-1]
        message = transcript[latest].content
        transcript = transcript[:latest]

    return AgentInput(
        message=message,
        ticket=TicketRef(
            id=ticket.id,
            subject=ticket.subject,
            status=ticket.status,
            priority=ticket.priority,
        ),
        customer=CustomerRef(
            id=ticket.customer_id, name=customer.name if customer else None
        ),
        channel=channel if channel is not None else ticket.source_channel,
        previous_messages=tuple(
            PriorTurn(
                role="customer" if m.sender_type == "customer" else "assistant",
                content=m.content,
            )
            for m in transcript
        ),
    )


async def _ask(
    settings: SupportAgentSettings,
    fixture: SupportFixture,
    agent_input: AgentInput,
    stream: bool,
    out: Console,
    status: Console,
) -> AgentResult:
    web_search = None
    if settings.web_search.api_key:
        web_search = BraveWebSearch(
            config=settings.web_search, observer=StructlogWebSearchObserver()
        )
    solver = create_solver(
        settings=settings,
        providers=create_providers(settings.provider),
        knowledge=FixtureKnowledgeSearch(fixture),
        store=FixtureSupportStore(fixture),
        agent_observer=StructlogAgentObserver(),
        tool_observer=StructlogToolObserver(),
        web_search=web_search,
    )
    try:
        if not stream:
            result = await solver.solve(agent_input)
            render_answer(out, result)
            return result

        renderer = StreamRenderer(out=out, status=status)
        final: AgentResult | None = None
        async for event in solver.solve_streaming(agent_input):
            renderer.render(event)
            if isinstance(event, CompleteEvent | ErrorEvent):
                final = event.result
        if final is None:
            raise RuntimeError("event stream ended without a terminal event")
        if final.type == "error":
            render_answer(out, final)
        return final
    finally:
        if web_search is not None:
            await web_search.aclose()


@app.command()
def ask(
    fixture_path: Path = typer.Argument(..., help="Path to a support fixture YAML"),
    ticket_id: str = typer.Option(..., "--ticket", "-t", help="Ticket id to answer"),
    message: str | None = typer.Option(
        None, "--message", "-m", help="Customer message (default: ticket's latest)"
    ),
    channel: Channel | None = typer.Option(
        None, "--channel", "-c", help="Channel (default: ticket's source channel)"
    ),
    stream: bool = typer.Option(
        False, "--stream", help="Reveal the answer incrementally"
    ),
    config_path: Path | None = typer.Option(
        None, "--config", help="Settings YAML (default: environment variables)"
    ),
    sessions_path: Path | None = typer.Option(
        None, "--sessions", help="Append the session record to this JSONL file"
    ),
    log_format: str = typer.Option(
        "console", "--log-format", help="Log format: 'console' or 'json'"
    ),
) -> None:
    """Answer a fixture ticket with the agentic support loop."""
    out = Console()
    status = Console(stderr=True)
    try:
        _configure_structlog(log_format=log_format)
        settings = _load_settings(config_path)
        fixture = load_fixture(fixture_path)
        agent_input = _build_input(fixture, ticket_id, message, channel)

        result = asyncio.run(
            _ask(settings, fixture, agent_input, stream, out=out, status=status)
        )

        session = build_session(
            result,
            ticket_id=agent_input.ticket.id,
            channel=agent_input.channel,
            rates=settings.cost,
        )
        if sessions_path is not None:
            recorder: SessionRecorder = JsonlSessionRecorder(
                path=sessions_path, observer=StructlogSessionObserver()
            )
            recorder.record(session)
        render_summary(status, result, session)

        if result.type == "error":
            raise typer.Exit(code=1)
    except KeyboardInterrupt:
        typer.echo("Interrupted.")
        sys.exit(1)
    except SupportAgentError as exc:
        typer.echo(str(exc))
        sys.exit(1)


@app.command()
def classify(
    message: str = typer.Argument(..., help="Ticket message to classify"),
    subject: str | None = typer.Option(None, "--subject", "-s", help="Ticket subject"),
    config_path: Path | None = typer.Option(
        None, "--config", help="Settings YAML (default: environment variables)"
    ),
    log_format: str = typer.Option(
        "console", "--log-format", help="Log format: 'console' or 'json'"
    ),
) -> None:
    """Classify a ticket's priority as low, normal, high, or urgent."""
    try:
        _configure_structlog(log_format=log_format)
        settings = _load_settings(config_path)
        classifier = PriorityClassifier(
            client=create_providers(settings.provider).primary,
            model=settings.triage_model,
            observer=StructlogTriageObserver(),
        )
        priority = asyncio.run(classifier.classify(message=message, subject=subject))
        typer.echo(priority)
    except SupportAgentError as exc:
        typer.echo(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    app()
