"""Render collaborator records as model-readable text."""

from support_agent.tools.domain.collaborators import (
    CustomerProfile,
    KnowledgeArticle,
    TicketMessage,
    TicketSummary,
    WebResult,
)


def format_articles(articles: list[KnowledgeArticle], max_content_length: int) -> str:
    """One markdown section per article; each excerpt truncated to max_content_length."""
    sections: list[str] = []
    for i, article in enumerate(articles, start=1):
        content = article.content
        if len(content) > max_content_length:
            content = content[:max_content_length] + "..."
        source = ""
        if article.source_file:
            section = f" > {article.section_path}" if article.section_path else ""
            source = f" [Source: {article.source_file}{section}]"
        relevance = ""
        if article.similarity > 0:
            relevance = f" (relevance: {round(article.similarity * 100)}%)"
        sections.append(
            f"### Article {i}: {article.title}{source}{relevance}\n"
            f"ID: {article.id}\n{content}"
        )
    return "\n\n---\n\n".join(sections)


def format_web_results(results: list[WebResult]) -> str:
    return "\n\n".join(
        f"{i}. **{r.title}**\n   {r.url}\n   {r.description}"
        for i, r in enumerate(results, start=1)
    )


def format_customer_context(
    customer: CustomerProfile, tickets: list[TicketSummary]
) -> str:
    if tickets:
        history = "\n".join(
            f"- [{t.status}] {t.subject} ({t.priority}, via {t.source_channel})"
            for t in tickets
        )
    else:
        history = "No previous tickets"
    return (
        "## Customer Profile\n"
        f"- Name: {customer.name or 'Unknown'}\n"
        f"- Email: {customer.email or 'Unknown'}\n"
        f"- Phone: {customer.phone_number or 'None'}\n"
        f"- Language: {customer.preferred_language}\n"
        f"- Preferred Channel: {customer.preferred_channel}\n"
        f"- Member Since: {customer.created_at}\n\n"
        f"## Recent Tickets ({len(tickets)})\n"
        f"{history}"
    )


def format_ticket_messages(messages: list[TicketMessage]) -> str:
    return "\n\n".join(f"[{m.sender_type}] {m.content}" for m in messages)
