"""Conversation — the append-only turn log owned by exactly one run."""

from collections.abc import Iterable, Sequence

from support_agent.completion.domain.message import (
    AssistantTurn,
    ToolResultTurn,
    Turn,
    UserTurn,
)
from support_agent.engine.domain.input import AgentInput


class Conversation:
    """Ordered turns exchanged with the completion service during one run.

    Turns are only ever appended. A tool round is appended atomically (the
    assistant turn together with every one of its tool results) so a failed
    round never leaves an assistant tool request without its results.
    """

    def __init__(self, turns: Iterable[Turn] = ()) -> None:
        self._turns: list[Turn] = list(turns)

    @classmethod
    def seeded(cls, agent_input: AgentInput, opening: str) -> "Conversation":
        """Prior turns first, then the opening user turn built from the input."""
        turns: list[Turn] = []
        for prior in agent_input.previous_messages:
            if prior.role == "customer":
                turns.append(UserTurn(content=prior.content))
            else:
                turns.append(AssistantTurn(text=prior.content))
        turns.append(UserTurn(content=opening))
        return cls(turns)

    def append_round(
        self, assistant: AssistantTurn, results: Sequence[ToolResultTurn]
    ) -> None:
        invoked = [inv.id for inv in assistant.tool_invocations]
        answered = [r.tool_call_id for r in results]
        if invoked != answered:
            raise ValueError(
                f"tool results {answered} do not match tool invocations {invoked}"
            )
        self._turns.append(assistant)
        self._turns.extend(results)

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    def __len__(self) -> int:
        return len(self._turns)
