"""Confidence Estimator — a heuristic over tool usage, not model-reported certainty."""

from collections.abc import Sequence

from support_agent.tools.domain.tool import SEARCH_TOOLS, ToolCallLog, ToolName

BASE_CONFIDENCE = 0.5
KB_GROUNDED_BOOST = 0.25
THOROUGH_SEARCH_BOOST = 0.10
UNGROUNDED_WEB_PENALTY = 0.10
UNGROUNDED_WEB_FLOOR = 0.4


def estimate_confidence(
    tool_calls: Sequence[ToolCallLog], kb_article_ids: Sequence[str]
) -> float:
    """Score in [0, 1].

    +0.25 when any knowledge-base article was surfaced, +0.10 for two or more
    search calls, and -0.10 (floored at 0.4) for web-only answers.
    """
    grounded = len(kb_article_ids) > 0
    confidence = BASE_CONFIDENCE

    if grounded:
        confidence += KB_GROUNDED_BOOST

    search_calls = [t for t in tool_calls if t.tool in SEARCH_TOOLS]
    if len(search_calls) >= 2:
        confidence += THOROUGH_SEARCH_BOOST

    used_web = any(t.tool == ToolName.SEARCH_WEB for t in tool_calls)
    if used_web and not grounded:
        confidence = max(confidence - UNGROUNDED_WEB_PENALTY, UNGROUNDED_WEB_FLOOR)

    return min(1.0, max(0.0, round(confidence, 4)))
