"""AgenticSolver — the bounded, multi-round tool-use loop in buffered and incremental modes."""

import time
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing
from dataclasses import dataclass

from support_agent.completion.domain.client import CompletionClient, CompletionProviders
from support_agent.completion.domain.message import (
    AssistantTurn,
    CompletionRequest,
    StreamFinished,
    StreamTextDelta,
    TokenUsage,
    ToolResultTurn,
)
from support_agent.completion.infrastructure.errors import CompletionRateLimitedError
from support_agent.config.domain.agent import AgentConfig
from support_agent.core.errors import SupportAgentError
from support_agent.engine.application.pacing import Pacer
from support_agent.engine.application.prompts import (
    FINAL_ANSWER_INSTRUCTION,
    build_opening_message,
    build_system_prompt,
    max_tokens_for,
)
from support_agent.engine.domain.confidence import estimate_confidence
from support_agent.engine.domain.conversation import Conversation
from support_agent.engine.domain.event import (
    AgentStreamEvent,
    CompleteEvent,
    ErrorEvent,
    TextDeltaEvent,
    ThinkingEvent,
    ToolCallEvent,
    ToolResultEvent,
)
from support_agent.engine.domain.input import AgentInput
from support_agent.engine.domain.observer import AgentObserver
from support_agent.engine.domain.result import (
    AgentResult,
    ErrorResult,
    EscalationResult,
    ResponseResult,
    TimeoutResult,
)
from support_agent.tools.application.dispatcher import ToolDispatcher
from support_agent.tools.domain.schemas import TOOL_SPECS, describe_tool
from support_agent.tools.domain.tool import (
    EscalationPayload,
    ToolCallLog,
    ToolContext,
    ToolOutcome,
)

TIMEOUT_MESSAGE = (
    "I'm still looking into this for you. A team member will follow up shortly"
    " with a complete answer."
)
TIMEOUT_CONFIDENCE = 0.3
ESCALATION_CONFIDENCE = 0.2
TOOL_LIMIT_MESSAGE = (
    "Tool call limit reached. Please provide your best response with the"
    " information gathered so far."
)
EXHAUSTED_FALLBACK_MESSAGE = (
    "I'm still investigating your question. A team member will follow up shortly."
)
DISABLED_MESSAGE = "AI agent is disabled"


# Loop outcomes produced by the shared round policy. Each mode renders them.
@dataclass(frozen=True)
class _Answered:
    text: str


@dataclass(frozen=True)
class _Escalated:
    payload: EscalationPayload


@dataclass(frozen=True)
class _TimedOut:
    pass


@dataclass(frozen=True)
class _Exhausted:
    pass


type _Exit = _Answered | _Escalated | _TimedOut | _Exhausted
type _Progress = ToolCallEvent | ToolResultEvent


class _RunState:
    """Everything one run accumulates. Created per run and never shared.

    exit stays _Exhausted unless the round policy ends the run earlier.
    """

    def __init__(
        self, agent_input: AgentInput, conversation: Conversation, clock: Callable[[], float]
    ) -> None:
        self.input = agent_input
        self.conversation = conversation
        self.exit: _Exit = _Exhausted()
        self._clock = clock
        self._started_at = clock()
        self.tool_calls: list[ToolCallLog] = []
        self.kb_article_ids: list[str] = []
        self.web_search_count = 0
        self.input_tokens = 0
        self.output_tokens = 0

    @property
    def ticket_id(self) -> str:
        return self.input.ticket.id

    @property
    def total_tool_calls(self) -> int:
        return len(self.tool_calls)

    def elapsed_ms(self) -> int:
        return max(0, int((self._clock() - self._started_at) * 1000))

    def add_usage(self, usage: TokenUsage) -> None:
        self.input_tokens += usage.input_tokens
        self.output_tokens += usage.output_tokens

    def record(self, outcome: ToolOutcome) -> None:
        self.tool_calls.append(outcome.log)
        for article_id in outcome.article_ids:
            if article_id not in self.kb_article_ids:
                self.kb_article_ids.append(article_id)
        if outcome.web_search_performed:
            self.web_search_count += 1

    def tool_context(self) -> ToolContext:
        return ToolContext(
            ticket_id=self.input.ticket.id,
            customer_id=self.input.customer.id,
            channel=self.input.channel,
            prior_tool_calls=self.total_tool_calls,
            web_searches_used=self.web_search_count,
        )

    def confidence(self) -> float:
        return estimate_confidence(self.tool_calls, self.kb_article_ids)

    def totals(self) -> dict[str, object]:
        return {
            "kb_article_ids": tuple(self.kb_article_ids),
            "web_search_count": self.web_search_count,
            "total_tool_calls": self.total_tool_calls,
            "tool_calls_detail": tuple(self.tool_calls),
            "duration_ms": self.elapsed_ms(),
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
        }


class AgenticSolver:
    """Drives the completion service and the tool dispatcher until a terminal state.

    Both modes share one round policy (_drive). Rounds are bounded by
    max_tool_rounds, dispatches by max_total_tools, and wall-clock time by
    timeout_ms, which is checked only at round boundaries. A slow completion
    call can therefore overrun the timeout by its own latency.

    Only the final streamed answer falls back to the secondary provider, and
    only once, on a rate-limit error.
    """

    def __init__(
        self,
        config: AgentConfig,
        providers: CompletionProviders,
        dispatcher: ToolDispatcher,
        observer: AgentObserver,
        pacer: Pacer,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._providers = providers
        self._dispatcher = dispatcher
        self._observer = observer
        self._pacer = pacer
        self._clock = clock

    async def solve(self, agent_input: AgentInput) -> AgentResult:
        """Run to completion and return exactly one AgentResult.

        Completion-service failures become an ErrorResult rather than raising.
        """
        run = self._start(agent_input, streaming=False)
        if not self._config.enabled:
            return self._fail(run, DISABLED_MESSAGE)

        try:
            async with aclosing(self._drive(run)) as progress:
                async for _ in progress:
                    pass

            match run.exit:
                case _Answered(text=text):
                    result: AgentResult = self._response(run, text)
                case _Escalated(payload=payload):
                    result = self._escalation(run, payload)
                case _TimedOut():
                    result = self._timeout(run)
                case _Exhausted():
                    result = self._response(run, await self._final_answer(run))
        except SupportAgentError as exc:
            return self._fail(run, str(exc))
        return self._complete(run, result)

    async def solve_streaming(
        self, agent_input: AgentInput
    ) -> AsyncIterator[AgentStreamEvent]:
        """Run incrementally, yielding progress events.

        The last event is always a CompleteEvent or an ErrorEvent. Closing the
        iterator early stops the run at the current suspension point; no
        further completion or tool calls are issued.
        """
        run = self._start(agent_input, streaming=True)
        if not self._config.enabled:
            result = self._fail(run, DISABLED_MESSAGE)
            yield ErrorEvent(error=result.error, result=result)
            return

        yield ThinkingEvent()
        try:
            async with aclosing(self._drive(run)) as progress:
                async for event in progress:
                    yield event

            match run.exit:
                case _Answered(text=text):
                    async with aclosing(self._pacer.reveal(text)) as revealed:
                        async for chunk in revealed:
                            yield TextDeltaEvent(content=chunk)
                    result: AgentResult = self._response(run, text)
                case _Escalated(payload=payload):
                    result = self._escalation(run, payload)
                    yield TextDeltaEvent(content=result.content)
                case _TimedOut():
                    result = self._timeout(run)
                    yield TextDeltaEvent(content=result.content)
                case _Exhausted():
                    chunks: list[str] = []
                    async with aclosing(self._stream_final_answer(run)) as deltas:
                        async for delta in deltas:
                            if delta is None:
                                # Fallback provider took over; earlier partial text is void.
                                chunks = []
                                continue
                            chunks.append(delta)
                            yield TextDeltaEvent(content=delta)
                    text = "".join(chunks)
                    if not text:
                        text = EXHAUSTED_FALLBACK_MESSAGE
                        yield TextDeltaEvent(content=text)
                    result = self._response(run, text)
        except SupportAgentError as exc:
            failure = self._fail(run, str(exc))
            yield ErrorEvent(error=failure.error, result=failure)
            return
        yield CompleteEvent(result=self._complete(run, result))

    async def _drive(self, run: _RunState) -> AsyncIterator[_Progress]:
        """Shared round policy. Yields tool progress events and sets run.exit."""
        system = build_system_prompt(
            run.input.channel, max_tool_rounds=self._config.max_tool_rounds
        )
        for round_index in range(self._config.max_tool_rounds):
            if run.elapsed_ms() >= self._config.timeout_ms:
                run.exit = _TimedOut()
                return

            self._observer.round_started(ticket_id=run.ticket_id, round_index=round_index)
            response = await self._providers.primary.create(
                CompletionRequest(
                    model=self._config.model,
                    system=system,
                    turns=run.conversation.turns,
                    max_tokens=max_tokens_for(run.input.channel),
                    tools=TOOL_SPECS,
                )
            )
            run.add_usage(response.usage)

            if not response.tool_invocations or response.stop_reason == "end_turn":
                if response.text:
                    run.exit = _Answered(text=response.text)
                    return
                break

            results: list[ToolResultTurn] = []
            for invocation in response.tool_invocations:
                if run.total_tool_calls >= self._config.max_total_tools:
                    self._observer.tool_budget_exhausted(
                        ticket_id=run.ticket_id, skipped_tool=invocation.name
                    )
                    results.append(
                        ToolResultTurn(
                            tool_call_id=invocation.id, content=TOOL_LIMIT_MESSAGE
                        )
                    )
                    continue

                yield ToolCallEvent(
                    tool=invocation.name, description=describe_tool(invocation.name)
                )
                outcome = await self._dispatcher.dispatch(
                    name=invocation.name,
                    arguments=invocation.arguments,
                    context=run.tool_context(),
                )
                run.record(outcome)
                self._observer.tool_executed(
                    ticket_id=run.ticket_id,
                    tool=invocation.name,
                    duration_ms=outcome.log.duration_ms,
                    success=outcome.success,
                )
                yield ToolResultEvent(tool=invocation.name, success=outcome.success)

                if outcome.escalation is not None:
                    run.exit = _Escalated(payload=outcome.escalation)
                    return

                results.append(
                    ToolResultTurn(tool_call_id=invocation.id, content=outcome.text)
                )

            run.conversation.append_round(
                AssistantTurn(
                    text=response.text, tool_invocations=response.tool_invocations
                ),
                results,
            )

        # No final call is issued once the deadline has passed.
        if run.elapsed_ms() >= self._config.timeout_ms:
            run.exit = _TimedOut()

    async def _final_answer(self, run: _RunState) -> str:
        response = await self._providers.primary.create(self._final_request(run))
        run.add_usage(response.usage)
        return response.text or EXHAUSTED_FALLBACK_MESSAGE

    async def _stream_final_answer(self, run: _RunState) -> AsyncIterator[str | None]:
        """Yield text deltas of the final answer. None marks a switch to the fallback."""
        request = self._final_request(run)
        try:
            async with aclosing(self._stream_from(self._providers.primary, run, request)) as deltas:
                async for delta in deltas:
                    yield delta
        except CompletionRateLimitedError as exc:
            if self._providers.fallback is None:
                raise
            self._observer.fallback_provider_used(
                ticket_id=run.ticket_id, reason=exc.reason
            )
            yield None
            async with aclosing(self._stream_from(self._providers.fallback, run, request)) as deltas:
                async for delta in deltas:
                    yield delta

    async def _stream_from(
        self, client: CompletionClient, run: _RunState, request: CompletionRequest
    ) -> AsyncIterator[str]:
        async with aclosing(client.stream(request)) as events:
            async for event in events:
                match event:
                    case StreamTextDelta(text=text):
                        if text:
                            yield text
                    case StreamFinished(usage=usage):
                        run.add_usage(usage)

    def _final_request(self, run: _RunState) -> CompletionRequest:
        system = build_system_prompt(
            run.input.channel, max_tool_rounds=self._config.max_tool_rounds
        )
        return CompletionRequest(
            model=self._config.model,
            system=f"{system}\n\n{FINAL_ANSWER_INSTRUCTION}",
            turns=run.conversation.turns,
            max_tokens=max_tokens_for(run.input.channel),
            tools=None,
        )

    def _start(self, agent_input: AgentInput, streaming: bool) -> _RunState:
        conversation = Conversation.seeded(
            agent_input, opening=build_opening_message(agent_input)
        )
        self._observer.run_started(
            ticket_id=agent_input.ticket.id,
            channel=agent_input.channel,
            model=self._config.model,
            streaming=streaming,
        )
        return _RunState(agent_input, conversation, clock=self._clock)

    def _response(self, run: _RunState, text: str) -> ResponseResult:
        return ResponseResult(content=text, confidence=run.confidence(), **run.totals())

    def _escalation(self, run: _RunState, payload: EscalationPayload) -> EscalationResult:
        return EscalationResult(
            content=f"I've connected you with our support team. {payload.summary}".strip(),
            confidence=ESCALATION_CONFIDENCE,
            escalation_reason=payload.reason,
            escalation_summary=payload.summary,
            **run.totals(),
        )

    def _timeout(self, run: _RunState) -> TimeoutResult:
        return TimeoutResult(
            content=TIMEOUT_MESSAGE, confidence=TIMEOUT_CONFIDENCE, **run.totals()
        )

    def _complete(self, run: _RunState, result: AgentResult) -> AgentResult:
        self._observer.run_completed(
            ticket_id=run.ticket_id,
            result_type=result.type,
            total_tool_calls=result.total_tool_calls,
            duration_ms=result.duration_ms,
            input_tokens=result.input_tokens,
            output_tokens=result.output_tokens,
        )
        return result

    def _fail(self, run: _RunState, reason: str) -> ErrorResult:
        self._observer.run_failed(ticket_id=run.ticket_id, reason=reason)
        return ErrorResult(content="", confidence=0.0, error=reason, **run.totals())
