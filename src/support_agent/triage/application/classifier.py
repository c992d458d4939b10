"""PriorityClassifier — a single cheap completion call that labels ticket urgency."""

import re

from support_agent.completion.domain.client import CompletionClient
from support_agent.completion.domain.message import CompletionRequest, UserTurn
from support_agent.core.errors import SupportAgentError
from support_agent.triage.domain.observer import TriageObserver
from support_agent.triage.domain.priority import Priority

_MAX_MESSAGE_CHARS = 500
_MAX_TOKENS = 10
_PRIORITY_PATTERN = re.compile(r"\b(urgent|high|normal|low)\b")

CLASSIFICATION_PROMPT = """\
You are a ticket priority classifier. Given a support message, output ONLY one \
word: low, normal, high, or urgent.

Rules:
- urgent: account compromised, cannot use product at all, data loss, legal threat, complete outage
- high: billing issue, major feature broken, time-sensitive request, cannot complete core workflow
- normal: how-to questions, general troubleshooting, feature requests, minor bugs
- low: feedback, cosmetic issues, general questions, suggestions

Output ONLY the priority word, nothing else."""


class PriorityClassifier:
    """Classifies a ticket's first message. Never raises; defaults to NORMAL."""

    def __init__(
        self, client: CompletionClient, model: str, observer: TriageObserver
    ) -> None:
        self._client = client
        self._model = model
        self._observer = observer

    async def classify(self, message: str, subject: str | None = None) -> Priority:
        excerpt = message[:_MAX_MESSAGE_CHARS]
        content = f"Subject: {subject}\n\nMessage: {excerpt}" if subject else excerpt

        try:
            response = await self._client.create(
                CompletionRequest(
                    model=self._model,
                    system=CLASSIFICATION_PROMPT,
                    turns=(UserTurn(content=content),),
                    max_tokens=_MAX_TOKENS,
                )
            )
        except SupportAgentError as exc:
            self._observer.classification_failed(reason=str(exc))
            return Priority.NORMAL

        priority = parse_priority(response.text)
        self._observer.classification_completed(priority=priority)
        return priority


def parse_priority(text: str) -> Priority:
    """Exact label first, then the first label word anywhere in the text."""
    normalized = text.strip().lower()
    if normalized in {p.value for p in Priority}:
        return Priority(normalized)
    match = _PRIORITY_PATTERN.search(normalized)
    if match:
        return Priority(match.group(1))
    return Priority.NORMAL
