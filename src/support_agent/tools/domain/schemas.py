"""Tool declarations offered to the model, plus caller-facing progress descriptions."""

from support_agent.completion.domain.message import ToolSpec
from support_agent.tools.domain.tool import ToolName


def _query_schema(description: str) -> dict[str, object]:
    return {
        "type": "object",
        "properties": {"query": {"type": "string", "description": description}},
        "required": ["query"],
    }


TOOL_SPECS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name=ToolName.SEARCH_KNOWLEDGE_BASE,
        description=(
            "Search the internal knowledge base for articles, FAQs, and"
            " troubleshooting guides. Always try this first. If results are poor,"
            " try rephrasing your query with different keywords."
        ),
        parameters=_query_schema(
            "Search query. Try specific keywords related to the customer issue."
        ),
    ),
    ToolSpec(
        name=ToolName.SEARCH_WEB,
        description=(
            "Search the web for information when the knowledge base does not cover"
            " the topic. Use for general tech questions, product features not in"
            " the knowledge base, or industry-standard troubleshooting."
        ),
        parameters=_query_schema(
            "Web search query. Include the product name for platform-specific info."
        ),
    ),
    ToolSpec(
        name=ToolName.GET_CUSTOMER_CONTEXT,
        description=(
            "Get the customer's profile and recent ticket history. Useful for"
            " understanding recurring issues or account-specific context."
        ),
        parameters={
            "type": "object",
            "properties": {
                "customer_id": {
                    "type": "string",
                    "description": "The customer ID to look up.",
                }
            },
            "required": ["customer_id"],
        },
    ),
    ToolSpec(
        name=ToolName.GET_TICKET_MESSAGES,
        description=(
            "Get the recent message history for a ticket. Use to understand what"
            " has already been discussed."
        ),
        parameters={
            "type": "object",
            "properties": {
                "ticket_id": {
                    "type": "string",
                    "description": "The ticket ID to get messages for.",
                }
            },
            "required": ["ticket_id"],
        },
    ),
    ToolSpec(
        name=ToolName.ESCALATE_TO_HUMAN,
        description=(
            "Escalate to a human agent. ONLY use as an absolute last resort after"
            " exhausting other tools. You must provide a reason and a summary of"
            " what you already tried."
        ),
        parameters={
            "type": "object",
            "properties": {
                "reason": {
                    "type": "string",
                    "description": (
                        "Why escalation is needed: repeated human demand, security"
                        " breach, legal threat, billing dispute, or all tools exhausted."
                    ),
                },
                "summary": {
                    "type": "string",
                    "description": (
                        "Summary of what you already tried and found for the human agent."
                    ),
                },
            },
            "required": ["reason", "summary"],
        },
    ),
)

_DESCRIPTIONS: dict[str, str] = {
    ToolName.SEARCH_KNOWLEDGE_BASE: "Searching knowledge base...",
    ToolName.SEARCH_WEB: "Searching the web...",
    ToolName.GET_CUSTOMER_CONTEXT: "Looking up customer info...",
    ToolName.GET_TICKET_MESSAGES: "Reviewing conversation history...",
    ToolName.ESCALATE_TO_HUMAN: "Connecting to support team...",
}


def describe_tool(name: str) -> str:
    """Return the progress line shown to the customer while a tool runs."""
    return _DESCRIPTIONS.get(name, "Processing...")
