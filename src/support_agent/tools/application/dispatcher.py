"""ToolDispatcher — executes one model-requested tool and reports a bounded text result."""

import json
import time

from support_agent.tools.application.formatting import (
    format_articles,
    format_customer_context,
    format_ticket_messages,
    format_web_results,
)
from support_agent.tools.domain.collaborators import (
    KnowledgeSearch,
    SupportStore,
    WebSearch,
)
from support_agent.tools.domain.escalation import EscalationGate
from support_agent.tools.domain.observer import ToolObserver
from support_agent.tools.domain.tool import (
    EscalationPayload,
    ToolCallLog,
    ToolContext,
    ToolName,
    ToolOutcome,
)

_KB_LIMIT = 5
_KB_CONTENT_BUDGET = 2000
_WEB_LIMIT = 5
_RECENT_TICKETS_LIMIT = 10
_TRANSCRIPT_LIMIT = 20
# Hard ceiling on any text handed back to the model.
_MAX_RESULT_CHARS = 12_000


class _Result:
    """Mutable scratch result assembled inside one dispatch."""

    def __init__(self, text: str, summary: str, success: bool = True) -> None:
        self.text = text
        self.summary = summary
        self.success = success
        self.article_ids: tuple[str, ...] = ()
        self.web_search_performed = False
        self.escalation: EscalationPayload | None = None


class ToolDispatcher:
    """Maps tool names to collaborator calls.

    dispatch() never raises for expected failures: empty results, missing
    records, policy rejections, and collaborator exceptions all become
    informative text so the model can adapt.
    """

    def __init__(
        self,
        knowledge: KnowledgeSearch,
        store: SupportStore,
        gate: EscalationGate,
        observer: ToolObserver,
        web_search: WebSearch | None = None,
        max_web_searches: int = 3,
    ) -> None:
        self._knowledge = knowledge
        self._store = store
        self._gate = gate
        self._observer = observer
        self._web_search = web_search
        self._max_web_searches = max_web_searches

    async def dispatch(
        self, name: str, arguments: dict[str, object], context: ToolContext
    ) -> ToolOutcome:
        start = time.monotonic()
        try:
            result = await self._route(name=name, arguments=arguments, context=context)
        except Exception as exc:
            # Collaborator failures are reported to the model, never raised.
            self._observer.tool_failed(tool=name, reason=str(exc))
            result = _Result(
                text=f"Tool error: {exc}. Try a different tool or rephrase the request.",
                summary=f"Tool error: {type(exc).__name__}",
                success=False,
            )

        text = result.text
        if len(text) > _MAX_RESULT_CHARS:
            text = text[:_MAX_RESULT_CHARS] + "..."

        return ToolOutcome(
            text=text,
            log=ToolCallLog(
                tool=name,
                input=dict(arguments),
                output_summary=result.summary,
                duration_ms=int((time.monotonic() - start) * 1000),
            ),
            success=result.success,
            article_ids=result.article_ids,
            web_search_performed=result.web_search_performed,
            escalation=result.escalation,
        )

    async def _route(
        self, name: str, arguments: dict[str, object], context: ToolContext
    ) -> _Result:
        match name:
            case ToolName.SEARCH_KNOWLEDGE_BASE:
                return await self._search_knowledge_base(arguments)
            case ToolName.SEARCH_WEB:
                return await self._search_web(arguments, context)
            case ToolName.GET_CUSTOMER_CONTEXT:
                return await self._get_customer_context(arguments, context)
            case ToolName.GET_TICKET_MESSAGES:
                return await self._get_ticket_messages(arguments, context)
            case ToolName.ESCALATE_TO_HUMAN:
                return self._escalate_to_human(arguments, context)
            case _:
                return _Result(
                    text=f"Unknown tool: {name}",
                    summary=f"Unknown tool: {name}",
                    success=False,
                )

    async def _search_knowledge_base(self, arguments: dict[str, object]) -> _Result:
        query = _str_arg(arguments, "query")
        if not query:
            return _Result(
                text="A non-empty 'query' is required to search the knowledge base.",
                summary="Missing query",
                success=False,
            )

        articles = await self._knowledge.search(query=query, limit=_KB_LIMIT)
        if not articles:
            return _Result(
                text=(
                    "No knowledge base articles found for this query. Try rephrasing"
                    " with different keywords, or use search_web."
                ),
                summary="No KB results",
                success=False,
            )

        articles = articles[:_KB_LIMIT]
        result = _Result(
            text=format_articles(articles, max_content_length=_KB_CONTENT_BUDGET),
            summary=(
                f"Found {len(articles)} KB articles"
                f" (top similarity: {articles[0].similarity:.2f})"
            ),
        )
        result.article_ids = tuple(a.id for a in articles)
        return result

    async def _search_web(
        self, arguments: dict[str, object], context: ToolContext
    ) -> _Result:
        if context.web_searches_used >= self._max_web_searches:
            return _Result(
                text=(
                    f"Maximum web searches ({self._max_web_searches}) reached."
                    " Please synthesize what you have."
                ),
                summary="Web search limit reached",
                success=False,
            )
        if self._web_search is None:
            return _Result(
                text=(
                    "Web search is not configured. Continue with knowledge base"
                    " information only."
                ),
                summary="Web search not configured",
                success=False,
            )

        query = _str_arg(arguments, "query")
        if not query:
            return _Result(
                text="A non-empty 'query' is required to search the web.",
                summary="Missing query",
                success=False,
            )

        results = await self._web_search.search(query=query, limit=_WEB_LIMIT)
        if not results:
            result = _Result(
                text=(
                    "No web results found. Try a different query or use what you"
                    " already know."
                ),
                summary="No web results",
                success=False,
            )
        else:
            result = _Result(
                text=format_web_results(results[:_WEB_LIMIT]),
                summary=f"Found {len(results[:_WEB_LIMIT])} web results",
            )
        result.web_search_performed = True
        return result

    async def _get_customer_context(
        self, arguments: dict[str, object], context: ToolContext
    ) -> _Result:
        customer_id = _str_arg(arguments, "customer_id") or context.customer_id
        customer = await self._store.get_customer(customer_id)
        if customer is None:
            return _Result(
                text="Customer not found.", summary="Customer not found", success=False
            )

        tickets = await self._store.recent_tickets(
            customer_id, limit=_RECENT_TICKETS_LIMIT
        )
        tickets = tickets[:_RECENT_TICKETS_LIMIT]
        return _Result(
            text=format_customer_context(customer, tickets),
            summary=f"Customer found, {len(tickets)} recent tickets",
        )

    async def _get_ticket_messages(
        self, arguments: dict[str, object], context: ToolContext
    ) -> _Result:
        ticket_id = _str_arg(arguments, "ticket_id") or context.ticket_id
        messages = await self._store.ticket_messages(ticket_id, limit=_TRANSCRIPT_LIMIT)
        if not messages:
            return _Result(
                text="No messages found in this ticket.",
                summary="No messages",
                success=False,
            )
        messages = messages[:_TRANSCRIPT_LIMIT]
        return _Result(
            text=format_ticket_messages(messages),
            summary=f"{len(messages)} messages retrieved",
        )

    def _escalate_to_human(
        self, arguments: dict[str, object], context: ToolContext
    ) -> _Result:
        decision = self._gate.evaluate(
            channel=context.channel, prior_tool_calls=context.prior_tool_calls
        )
        if not decision.approved:
            self._observer.escalation_blocked(
                channel=context.channel,
                prior_tool_calls=decision.prior_tool_calls,
                required_tool_calls=decision.required_tool_calls,
            )
            return _Result(
                text=(
                    "You must try harder before escalating. You've only used"
                    f" {decision.prior_tool_calls} tools (minimum:"
                    f" {decision.required_tool_calls}). Try: (1) search_knowledge_base"
                    " with different phrasings, (2) search_web for broader"
                    " information, (3) get_customer_context for account details,"
                    " (4) ask the customer a clarifying question. Only escalate"
                    " after exhausting these options."
                ),
                summary="Escalation blocked: insufficient tool usage",
                success=False,
            )

        payload = EscalationPayload(
            reason=_str_arg(arguments, "reason") or "unspecified",
            summary=_str_arg(arguments, "summary"),
        )
        self._observer.escalation_approved(channel=context.channel, reason=payload.reason)
        result = _Result(
            text=json.dumps(payload.model_dump()),
            summary=f"Escalated: {payload.reason[:80]}",
        )
        result.escalation = payload
        return result


def _str_arg(arguments: dict[str, object], key: str) -> str:
    value = arguments.get(key)
    if value is None:
        return ""
    return str(value).strip()
