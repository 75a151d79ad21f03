"""
Presentation of analysis results.

Trims an AnalysisReport to one of three detail levels and builds the ranked
product plan. Quotes come from the redacted records kept on the report, and
support-agent boilerplate is filtered out so quotes are customer voice.

Detail levels:
  - summary:  scores, evidence summary, quotes, top 5 emerging patterns
  - standard: adds sub-scores and data-point titles (capped), top 10 emerging
  - full:     complete analysis
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence

from .analyzer import FEATURE_REQUEST_SOURCE, TICKET_SOURCE, AnalysisReport
from .methodology import METHODOLOGY_VERSION
from .models import Provenance, SignalRef, ThemeResult
from .pii_redactor import PII_CATEGORIES
from .records import FeatureRequestRecord, TicketRecord

logger = logging.getLogger(__name__)

DetailLevel = Literal["summary", "standard", "full"]
DETAIL_LEVELS = ("summary", "standard", "full")

MAX_QUOTES = 3
QUOTE_MAX_LENGTH = 200
MAX_TITLES = 50
NO_QUOTE_AVAILABLE = "No direct customer quote available"

EMERGING_LIMITS = {"summary": 5, "standard": 10}
EMERGING_SAMPLE_TITLES = 3
PLAN_EMERGING_LIMIT = 3
PLAN_EMERGING_SAMPLE_TITLES = 2

METHODOLOGY_RESOURCE = "/api/methodology"

# Support-agent phrasing; a match means the text is not a customer quote
AGENT_RESPONSE_PATTERNS = [
    re.compile(p, re.IGNORECASE) for p in (
        # Closings & pleasantries
        r"happy to help",
        r"hope this helps",
        r"let me know if",
        r"don't hesitate",
        r"do not hesitate",
        r"feel free to",
        r"is there anything else",
        r"glad (to |you |we )",
        r"pleasure (to |helping)",
        r"(best|warm|kind) regards",
        # Apologies & acknowledgments
        r"i apologize for",
        r"we apologize for",
        r"sorry for the inconvenience",
        r"thank you for (reaching|contacting|writing|your patience)",
        r"thanks for (reaching|contacting|writing|your patience)",
        r"thanks (so much )?for checking in",
        r"bringing this to our attention",
        # Agent action language
        r"i've (checked|looked into|forwarded|sent|updated|resolved|fixed|escalated)",
        r"we've (identified|checked|looked|resolved|fixed|addressed|updated|escalated)",
        r"has been (resolved|fixed|addressed|updated|escalated)",
        r"this has been flagged",
        r"our (team|support|engineering|developers)",
        r"i can help with that",
        # Automated text
        r"ai-generated draft",
        r"your request .* could(n't| not) be created",
        r"powered by",
        r"before i proceed",
    )
]


def is_likely_agent_response(text: Optional[str]) -> bool:
    """True for empty text or text that reads like a support agent."""
    if not text:
        return True
    return any(pattern.search(text) for pattern in AGENT_RESPONSE_PATTERNS)


def truncate_quote(text: str, limit: int = QUOTE_MAX_LENGTH) -> str:
    if len(text) <= limit:
        return text
    return text[:limit - 3] + "..."


def _ticket_quote(ticket: TicketRecord) -> Optional[str]:
    message = ticket.customer_messages[0] if ticket.customer_messages else ""
    if message and not is_likely_agent_response(message):
        return f'[Support ticket] "{truncate_quote(message)}"'
    if ticket.subject and not is_likely_agent_response(ticket.subject):
        return f'[Support ticket] "{ticket.subject}"'
    return None


def _feature_request_quote(request: FeatureRequestRecord) -> str:
    prefix = f"[Feature request, {request.votes_count} votes]"
    customer_comment = next(
        (c for c in request.comments if c.role != "admin"), None
    )
    if customer_comment and not is_likely_agent_response(customer_comment.comment):
        return f'{prefix} "{truncate_quote(customer_comment.comment)}"'
    return f'{prefix} "{request.title}"'


def extract_quotes_for_theme(
    data_points: Sequence[SignalRef],
    tickets_by_id: Mapping[str, TicketRecord],
    requests_by_id: Mapping[str, FeatureRequestRecord],
    max_quotes: int = MAX_QUOTES,
) -> List[str]:
    """
    Pick representative customer quotes for a theme.

    Tickets quote the first customer message, falling back to the subject;
    a ticket whose message and subject both read like agent text is skipped.
    Feature requests quote the first non-admin comment, falling back to the
    title.

    Args:
        data_points: Theme signal references, in priority order
        tickets_by_id: Redacted tickets keyed by signal id
        requests_by_id: Redacted feature requests keyed by signal id
        max_quotes: Maximum quotes to return

    Returns:
        Quote strings, or a single placeholder if none qualified
    """
    quotes: List[str] = []
    for ref in data_points:
        if len(quotes) >= max_quotes:
            break

        if ref.source == Provenance.REACTIVE:
            ticket = tickets_by_id.get(ref.id)
            quote = _ticket_quote(ticket) if ticket else None
        else:
            request = requests_by_id.get(ref.id)
            quote = _feature_request_quote(request) if request else None

        if quote:
            quotes.append(quote)

    return quotes or [NO_QUOTE_AVAILABLE]


def signal_type(theme: ThemeResult) -> str:
    """convergent, reactive or proactive."""
    if theme.convergent:
        return "convergent"
    return "reactive" if theme.reactive_count > 0 else "proactive"


def build_evidence_summary(theme: ThemeResult) -> str:
    """One-line description of the evidence behind a theme."""
    total = theme.reactive_count + theme.proactive_count
    parts = []
    if theme.reactive_count > 0:
        parts.append(f"{theme.reactive_count} support tickets")
    if theme.proactive_count > 0:
        parts.append(f"{theme.proactive_count} feature requests")
    summary = f"{total} signals ({', '.join(parts)})."
    if theme.convergent:
        summary += (
            " Convergent: appears in both support and feature requests"
            " (2x priority boost)."
        )
    return summary


def _titles_block(theme: ThemeResult) -> Dict[str, Any]:
    titles = [ref.title for ref in theme.data_points]
    block: Dict[str, Any] = {
        "data_points_total": len(titles),
        "data_point_titles": titles[:MAX_TITLES],
    }
    if len(titles) > MAX_TITLES:
        block["data_point_titles_truncated"] = True
    return block


def _check_detail_level(detail_level: str) -> None:
    if detail_level not in DETAIL_LEVELS:
        raise ValueError(
            f"Unknown detail level {detail_level!r}, expected one of {DETAIL_LEVELS}"
        )


def trim_analysis(report: AnalysisReport, detail_level: DetailLevel = "summary") -> Dict[str, Any]:
    """
    Shape the analysis for the requested detail level.

    Returns:
        JSON-ready dict
    """
    _check_detail_level(detail_level)
    analysis = report.analysis
    if detail_level == "full":
        return analysis.model_dump(mode="json")

    tickets_by_id = report.tickets_by_signal_id()
    requests_by_id = report.feature_requests_by_signal_id()

    themes = []
    for theme in analysis.themes:
        entry: Dict[str, Any] = {
            "theme_id": theme.theme_id,
            "label": theme.label,
            "category": theme.category,
            "priority_score": theme.priority_score,
            "convergent": theme.convergent,
            "signal_type": signal_type(theme),
            "reactive_count": theme.reactive_count,
            "proactive_count": theme.proactive_count,
            "evidence_summary": build_evidence_summary(theme),
            "representative_quotes": extract_quotes_for_theme(
                theme.data_points, tickets_by_id, requests_by_id
            ),
        }
        if detail_level == "standard":
            entry.update({
                "frequency_score": theme.frequency_score,
                "severity_score": theme.severity_score,
                "vote_momentum_score": theme.vote_momentum_score,
            })
            entry.update(_titles_block(theme))
        themes.append(entry)

    emerging = []
    for item in analysis.emerging_themes[:EMERGING_LIMITS[detail_level]]:
        pattern: Dict[str, Any] = {"pattern": item.ngram, "frequency": item.frequency}
        if detail_level == "standard":
            pattern["sample_titles"] = [
                ref.title for ref in item.data_points[:EMERGING_SAMPLE_TITLES]
            ]
        emerging.append(pattern)

    return {
        "config_version": analysis.config_version,
        "known_themes_count": analysis.known_themes_count,
        "total_data_points": analysis.total_data_points,
        "reactive_count": analysis.reactive_count,
        "proactive_count": analysis.proactive_count,
        "themes": themes,
        "emerging_themes": emerging,
        "unmatched_count": analysis.unmatched_count,
    }


def _kpi_block(kpi_context: Optional[str]) -> Dict[str, Any]:
    if kpi_context:
        return {
            "provided": True,
            "note": (
                "Business metrics provided below. Use the methodology to decide "
                "how these metrics should adjust the priority ranking above."
            ),
            "metrics": kpi_context,
        }
    return {
        "provided": False,
        "note": (
            "No business metrics provided. Priorities are based on customer "
            "signals only. For stronger prioritization, provide churn data, "
            "traffic trends, or revenue metrics."
        ),
    }


def build_product_plan(
    report: AnalysisReport,
    max_priorities: int = 5,
    detail_level: DetailLevel = "summary",
    kpi_context: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build a ranked product plan from the top themes.

    Args:
        report: Analysis report
        max_priorities: Number of themes to rank
        detail_level: summary, standard or full
        kpi_context: Free-text business metrics passed through verbatim
        now: Timestamp for generated_at (default: current UTC time)

    Returns:
        JSON-ready plan dict
    """
    _check_detail_level(detail_level)
    analysis = report.analysis
    tickets_by_id = report.tickets_by_signal_id()
    requests_by_id = report.feature_requests_by_signal_id()

    priorities = []
    for rank, theme in enumerate(analysis.themes[:max_priorities], start=1):
        evidence: Dict[str, Any] = {
            "total_data_points": len(theme.data_points),
            "support_tickets": theme.reactive_count,
            "feature_requests": theme.proactive_count,
        }
        if detail_level != "summary":
            evidence.update({
                "frequency_score": theme.frequency_score,
                "severity_score": theme.severity_score,
                "vote_momentum_score": theme.vote_momentum_score,
            })

        priority: Dict[str, Any] = {
            "rank": rank,
            "theme": theme.label,
            "theme_id": theme.theme_id,
            "category": theme.category,
            "signal_type": signal_type(theme),
            "priority_score": theme.priority_score,
            "convergent": theme.convergent,
            "evidence": evidence,
            "evidence_summary": build_evidence_summary(theme),
            "customer_quotes": extract_quotes_for_theme(
                theme.data_points, tickets_by_id, requests_by_id
            ),
        }
        if detail_level != "summary":
            priority.update(_titles_block(theme))
        priorities.append(priority)

    emerging = [
        {
            "pattern": item.ngram,
            "frequency": item.frequency,
            "sample_titles": [
                ref.title for ref in item.data_points[:PLAN_EMERGING_SAMPLE_TITLES]
            ],
        }
        for item in analysis.emerging_themes[:PLAN_EMERGING_LIMIT]
    ]

    plan: Dict[str, Any] = {
        "generated_at": (now or datetime.now(timezone.utc)).isoformat(),
        "methodology_version": METHODOLOGY_VERSION,
        "methodology_resource": METHODOLOGY_RESOURCE,
        "detail_level": detail_level,
        "data_sources": list(report.data_sources),
        "pii_scrubbing_applied": True,
        "pii_categories_redacted": list(report.pii_categories_redacted),
        "summary": {
            "total_signals_analyzed": analysis.total_data_points,
            "reactive_signals": analysis.reactive_count,
            "proactive_signals": analysis.proactive_count,
            "themes_detected": len(analysis.themes),
            "convergent_themes": sum(1 for t in analysis.themes if t.convergent),
            "unmatched_signals": analysis.unmatched_count,
        },
        "priorities": priorities,
        "emerging_themes": emerging,
        "kpi_context": _kpi_block(kpi_context),
    }
    if detail_level == "full":
        plan["raw_analysis"] = analysis.model_dump(mode="json")

    logger.info(
        f"Built product plan with {len(priorities)} priorities "
        f"(detail_level={detail_level})"
    )
    return plan


def build_data_preview(
    ticket_count: int,
    feature_request_count: int,
    kpi_context: Optional[str] = None,
) -> Dict[str, Any]:
    """Describe what an analysis would process without touching content."""
    data_sources = []
    if ticket_count:
        data_sources.append(TICKET_SOURCE)
    if feature_request_count:
        data_sources.append(FEATURE_REQUEST_SOURCE)

    return {
        "preview": True,
        "description": "Preview of the data an analysis would process.",
        "data_sources": data_sources,
        "support_tickets": {
            "count": ticket_count,
            "fields_used": [
                "subject (PII-scrubbed)",
                "preview (PII-scrubbed)",
                "customer messages (PII-scrubbed)",
                "tags",
                "thread count",
            ],
            "fields_not_used": ["customer email (always redacted)", "agent responses"],
        },
        "feature_requests": {
            "count": feature_request_count,
            "fields_used": [
                "title (PII-scrubbed)",
                "description (PII-scrubbed)",
                "comment text (PII-scrubbed)",
                "vote count",
                "comment count",
            ],
            "fields_not_used": ["voter identities", "commenter emails"],
        },
        "pii_scrubbing": {
            "enabled": True,
            "patterns_scrubbed": list(PII_CATEGORIES),
            "customer_email_field": "always replaced with [REDACTED]",
        },
        "kpi_context_provided": bool(kpi_context),
    }
