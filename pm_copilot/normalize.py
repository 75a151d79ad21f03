"""
Signal normalization.

Converts redacted raw records into the canonical Signal shape consumed by
the theme matcher and the emerging-theme detector.

Two provenances:
1. Reactive: support tickets. Text = subject + preview + customer messages.
2. Proactive: feature-board posts. Text = title + description + comments.

Both functions are total. Missing optional fields become empty strings or
zero; nothing here raises on sparse input. Callers must pass records that
have already been through the redactor.
"""

from typing import Iterable, List

from .models import Provenance, Signal, SignalAttributes
from .records import FeatureRequestRecord, TicketRecord

# ID prefixes keep the two provenances from colliding
REACTIVE_ID_PREFIX = "hs-"
PROACTIVE_ID_PREFIX = "pl-"


def build_search_text(parts: Iterable[str]) -> str:
    """
    Join free-text fields into one lower-cased blob for matching.

    Empty parts are skipped; every non-empty part appears exactly once.

    Examples:
        ["Calendar Broken", "", "it won't sync"] -> "calendar broken it won't sync"
    """
    return " ".join(part for part in parts if part).lower()


def reactive_signal_id(ticket_id: str) -> str:
    return f"{REACTIVE_ID_PREFIX}{ticket_id}"


def proactive_signal_id(request_id: str) -> str:
    return f"{PROACTIVE_ID_PREFIX}{request_id}"


def ticket_to_signal(record: TicketRecord) -> Signal:
    """
    Normalize a (redacted) support ticket.

    Args:
        record: Redacted TicketRecord

    Returns:
        Reactive Signal
    """
    text = build_search_text(
        [record.subject or "", record.preview or "", *(record.customer_messages or [])]
    )
    return Signal(
        id=reactive_signal_id(record.id),
        provenance=Provenance.REACTIVE,
        title=record.subject or "",
        text=text,
        created_at=record.created_at,
        attributes=SignalAttributes(
            tags=list(record.tags or []),
            thread_count=record.thread_count or 0,
        ),
    )


def feature_request_to_signal(record: FeatureRequestRecord) -> Signal:
    """
    Normalize a (redacted) feature-board post.

    Args:
        record: Redacted FeatureRequestRecord

    Returns:
        Proactive Signal
    """
    comment_texts = [c.comment for c in record.comments or []]
    text = build_search_text(
        [record.title or "", record.description or "", *comment_texts]
    )
    return Signal(
        id=proactive_signal_id(record.id),
        provenance=Provenance.PROACTIVE,
        title=record.title or "",
        text=text,
        created_at=record.created_at,
        attributes=SignalAttributes(
            votes=record.votes_count or 0,
            comments_count=record.comments_count or 0,
            portal=record.portal or None,
        ),
    )


def to_signals(
    tickets: Iterable[TicketRecord],
    feature_requests: Iterable[FeatureRequestRecord],
) -> List[Signal]:
    """Normalize both batches, reactive first, preserving input order."""
    signals = [ticket_to_signal(t) for t in tickets]
    signals.extend(feature_request_to_signal(r) for r in feature_requests)
    return signals
