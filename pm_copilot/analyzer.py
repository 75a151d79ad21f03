"""
Feedback analysis entry point.

Runs one request-scoped analysis over already-fetched records:

    raw records -> redact -> normalize -> match + score -> emerging themes

PII categories are collected per call and returned with the report; nothing
is shared between concurrent analyses.
"""

import logging
import time
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

from .emerging_themes import detect_emerging_themes
from .models import AnalysisResult, Provenance, ThemesConfig
from .normalize import proactive_signal_id, reactive_signal_id, to_signals
from .pii_redactor import redact_feature_request, redact_ticket
from .records import FeatureRequestRecord, TicketRecord
from .theme_matcher import match_signals
from .theme_scorer import ThemeScorer

logger = logging.getLogger(__name__)

# Data source names reported back to callers
TICKET_SOURCE = "helpscout_tickets"
FEATURE_REQUEST_SOURCE = "productlift_votes"

# Positional id for records that arrive without one
MISSING_ID_PREFIX = "row-"


@dataclass
class AnalysisReport:
    """Analysis plus the audit data needed to present it."""

    analysis: AnalysisResult
    pii_categories_redacted: List[str] = field(default_factory=list)
    tickets: List[TicketRecord] = field(default_factory=list)  # redacted
    feature_requests: List[FeatureRequestRecord] = field(default_factory=list)  # redacted
    data_sources: List[str] = field(default_factory=list)

    def tickets_by_signal_id(self) -> Dict[str, TicketRecord]:
        return {reactive_signal_id(t.id): t for t in self.tickets}

    def feature_requests_by_signal_id(self) -> Dict[str, FeatureRequestRecord]:
        return {proactive_signal_id(r.id): r for r in self.feature_requests}


def _coerce(records: Optional[Iterable[Any]], record_cls) -> List[Any]:
    """
    Turn records or dicts into record objects.

    Records without an id get a positional one ("row-<index>") so that
    signal ids stay unique within the batch.
    """
    coerced = []
    for record in records or []:
        if isinstance(record, record_cls):
            coerced.append(record)
        elif isinstance(record, dict):
            coerced.append(record_cls.from_dict(record))
        else:
            raise TypeError(
                f"Expected {record_cls.__name__} or dict, got {type(record).__name__}"
            )

    taken = {record.id for record in coerced if record.id}
    for index, record in enumerate(coerced):
        if record.id:
            continue
        fallback = f"{MISSING_ID_PREFIX}{index}"
        while fallback in taken:
            fallback = f"_{fallback}"
        taken.add(fallback)
        coerced[index] = replace(record, id=fallback)
        logger.warning(
            f"{record_cls.__name__} at position {index} has no id, using {fallback}"
        )
    return coerced


def analyze_feedback(
    tickets: Iterable[Union[TicketRecord, Dict[str, Any]]],
    feature_requests: Iterable[Union[FeatureRequestRecord, Dict[str, Any]]],
    config: ThemesConfig,
    now: Optional[datetime] = None,
    scorer: Optional[ThemeScorer] = None,
) -> AnalysisReport:
    """
    Analyze support tickets and feature requests against configured themes.

    Args:
        tickets: Raw (unredacted) ticket records or dicts
        feature_requests: Raw (unredacted) feature-request records or dicts
        config: Validated theme configuration
        now: Reference time for recency decay (default: current UTC time)
        scorer: Optional scorer override

    Returns:
        AnalysisReport with themes sorted by priority and the PII audit trail
    """
    start = time.time()
    now = now or datetime.now(timezone.utc)
    scorer = scorer or ThemeScorer()

    categories = set()

    redacted_tickets = []
    for ticket in _coerce(tickets, TicketRecord):
        redacted, found = redact_ticket(ticket)
        redacted_tickets.append(redacted)
        categories |= found

    redacted_requests = []
    for request in _coerce(feature_requests, FeatureRequestRecord):
        redacted, found = redact_feature_request(request)
        redacted_requests.append(redacted)
        categories |= found

    signals = to_signals(redacted_tickets, redacted_requests)
    matches = match_signals(signals, config.themes)
    themes = scorer.score_matches(matches, config.themes, now=now)
    emerging = detect_emerging_themes(
        matches.unmatched,
        config.stop_words,
        config.emerging_theme_min_frequency,
    )

    analysis = AnalysisResult(
        config_version=config.version,
        known_themes_count=len(config.themes),
        total_data_points=len(signals),
        reactive_count=sum(1 for s in signals if s.provenance == Provenance.REACTIVE),
        proactive_count=sum(1 for s in signals if s.provenance == Provenance.PROACTIVE),
        themes=themes,
        emerging_themes=emerging,
        unmatched_count=len(matches.unmatched),
    )

    data_sources = []
    if redacted_tickets:
        data_sources.append(TICKET_SOURCE)
    if redacted_requests:
        data_sources.append(FEATURE_REQUEST_SOURCE)

    pii_categories = sorted(categories)
    elapsed = time.time() - start
    logger.info(
        f"Analyzed {analysis.total_data_points} signals in {elapsed:.2f}s: "
        f"{len(themes)} themes, {len(emerging)} emerging, "
        f"{analysis.unmatched_count} unmatched, pii_redacted={pii_categories}"
    )

    return AnalysisReport(
        analysis=analysis,
        pii_categories_redacted=pii_categories,
        tickets=redacted_tickets,
        feature_requests=redacted_requests,
        data_sources=data_sources,
    )
