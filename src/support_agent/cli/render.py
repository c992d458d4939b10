"""Rich rendering of agent progress events and run summaries."""

from rich.console import Console
from rich.table import Table
from rich.text import Text

from support_agent.engine.domain.event import (
    AgentStreamEvent,
    CompleteEvent,
    ErrorEvent,
    TextDeltaEvent,
    ThinkingEvent,
    ToolCallEvent,
    ToolResultEvent,
)
from support_agent.engine.domain.result import AgentResult, EscalationResult, ErrorResult
from support_agent.session.domain.session import AgentSession

_RESULT_STYLES: dict[str, str] = {
    "response": "bright_green",
    "escalation": "yellow",
    "timeout": "magenta",
    "error": "red",
}


class StreamRenderer:
    """Writes answer text to `out` as it arrives and tool progress to `status`."""

    def __init__(self, out: Console, status: Console) -> None:
        self._out = out
        self._status = status
        self._text_started = False

    def render(self, event: AgentStreamEvent) -> None:
        match event:
            case ThinkingEvent():
                self._status.print(Text("Thinking...", style="dim"))
            case ToolCallEvent(description=description):
                self._status.print(Text(f"  {description}", style="cyan"))
            case ToolResultEvent(tool=tool, success=success):
                mark = Text("ok", style="green") if success else Text("no result", style="grey50")
                self._status.print(Text.assemble(("  ", ""), (tool, "dim"), " ", mark))
            case TextDeltaEvent(content=content):
                self._text_started = True
                self._out.print(content, end="", markup=False, highlight=False)
            case CompleteEvent() | ErrorEvent():
                if self._text_started:
                    self._out.print()


def render_answer(console: Console, result: AgentResult) -> None:
    if isinstance(result, ErrorResult):
        console.print(Text(result.error, style="red"))
        return
    console.print(result.content, markup=False, highlight=False)


def render_summary(
    console: Console, result: AgentResult, session: AgentSession
) -> None:
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column(style="dim")
    table.add_column()
    table.add_row("Result", Text(result.type, style=_RESULT_STYLES[result.type]))
    table.add_row("Confidence", f"{result.confidence:.2f}")
    table.add_row("Tool calls", str(result.total_tool_calls))
    for log in result.tool_calls_detail:
        table.add_row("", f"{log.tool} ({log.duration_ms} ms): {log.output_summary}")
    table.add_row("KB articles", ", ".join(result.kb_article_ids) or "-")
    table.add_row("Web searches", str(result.web_search_count))
    table.add_row("Tokens", f"{result.input_tokens} in / {result.output_tokens} out")
    table.add_row("Estimated cost", f"${session.estimated_cost_usd:.6f}")
    table.add_row("Duration", f"{result.duration_ms} ms")
    if isinstance(result, EscalationResult):
        table.add_row("Escalation reason", result.escalation_reason)
        table.add_row("Escalation summary", result.escalation_summary)
    console.print()
    console.print(table)
