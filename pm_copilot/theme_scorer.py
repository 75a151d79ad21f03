#!/usr/bin/env python3
"""
Theme Priority Scorer.

Computes frequency, severity and vote-momentum scores (0-100) for every
configured theme that matched at least one signal, then combines them into
a priority score with a convergence boost for themes seen in BOTH support
tickets and feature requests.

    priority = (frequency x 0.35 + severity x 0.35 + vote_momentum x 0.30)
               x convergence_boost

Usage:
    from pm_copilot.theme_scorer import ThemeScorer

    scorer = ThemeScorer()
    results = scorer.score(signals, config.themes, now=datetime.now(timezone.utc))
    # Returns ThemeResult list sorted by priority_score (descending)

Output is deterministic for identical inputs. The only clock dependence is
the recency term, and `now` can be injected.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from .models import Provenance, Signal, ThemeResult
from .theme_matcher import ThemeMatches, coerce_theme_definitions, match_signals

logger = logging.getLogger(__name__)

# ============================================================================
# SCORING WEIGHTS
# ============================================================================

FREQUENCY_WEIGHT = 0.35
SEVERITY_WEIGHT = 0.35
VOTE_MOMENTUM_WEIGHT = 0.30

CONVERGENCE_BOOST = 2.0

SCORE_SCALE = 100

# Severity (reactive signals only)
SEVERITY_PER_THREAD = 10
SEVERITY_THREAD_CAP = 50
SEVERITY_RECENCY_MAX = 30
SEVERITY_RECENCY_DECAY_DAYS = 7
SEVERITY_MAX = 100

# One boost per signal: the highest-value matching tag
SEVERITY_TAG_BOOST = {
    "escalation": 30,
    "escalated": 30,
    "urgent": 25,
    "critical": 25,
    "bug": 20,
}

# Vote momentum (proactive signals only)
VOTE_WEIGHT = 0.8
COMMENT_WEIGHT = 0.2

SECONDS_PER_DAY = 24 * 60 * 60


# ============================================================================
# DATA CLASSES
# ============================================================================


@dataclass
class ThemeScoreBreakdown:
    """Intermediate values for one theme, before cross-theme normalization."""

    theme_id: str
    signals: List[Signal] = field(default_factory=list)
    reactive_count: int = 0
    proactive_count: int = 0
    severity: float = 0.0
    raw_vote_momentum: float = 0.0

    @property
    def frequency(self) -> int:
        return len(self.signals)

    @property
    def convergent(self) -> bool:
        return self.reactive_count > 0 and self.proactive_count > 0


# ============================================================================
# COMPONENT SCORES
# ============================================================================


def _as_aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def age_in_days(created_at: Optional[datetime], now: datetime) -> Optional[float]:
    """Age of a signal in days. Future timestamps count as age 0."""
    if created_at is None:
        return None
    delta = (_as_aware(now) - _as_aware(created_at)).total_seconds() / SECONDS_PER_DAY
    return max(delta, 0.0)


def tag_boost(tags: Sequence[str]) -> int:
    """Highest severity boost among the tags (0 if none match)."""
    boosts = [SEVERITY_TAG_BOOST.get(tag.lower(), 0) for tag in tags if tag]
    return max(boosts, default=0)


def signal_severity(signal: Signal, now: datetime) -> float:
    """
    Severity contribution of one reactive signal.

    thread_count x 10 (capped at 50) + 30 x exp(-age_days / 7) + tag boost.
    A signal without a timestamp gets no recency component.
    """
    attrs = signal.attributes
    score = float(min(attrs.thread_count * SEVERITY_PER_THREAD, SEVERITY_THREAD_CAP))

    age = age_in_days(signal.created_at, now)
    if age is not None:
        score += SEVERITY_RECENCY_MAX * math.exp(-age / SEVERITY_RECENCY_DECAY_DAYS)

    score += tag_boost(attrs.tags)
    return score


def compute_severity(signals: Sequence[Signal], now: datetime) -> float:
    """Mean severity over the reactive signals, capped at 100. 0 if none."""
    reactive = [s for s in signals if s.provenance == Provenance.REACTIVE]
    if not reactive:
        return 0.0
    total = sum(signal_severity(s, now) for s in reactive)
    return min(total / len(reactive), SEVERITY_MAX)


def compute_raw_vote_momentum(signals: Sequence[Signal]) -> float:
    """votes x 0.8 + comments x 0.2 over the proactive signals."""
    proactive = [s for s in signals if s.provenance == Provenance.PROACTIVE]
    total_votes = sum(s.attributes.votes for s in proactive)
    total_comments = sum(s.attributes.comments_count for s in proactive)
    return total_votes * VOTE_WEIGHT + total_comments * COMMENT_WEIGHT


def normalize_to_scale(value: float, maximum: float) -> float:
    """Scale value against the cross-theme maximum to 0-100."""
    if maximum <= 0:
        return 0.0
    return (value / maximum) * SCORE_SCALE


# ============================================================================
# SCORER CLASS
# ============================================================================


class ThemeScorer:
    """Scores and ranks configured themes over a batch of signals."""

    def __init__(self, convergence_boost: float = CONVERGENCE_BOOST):
        self.convergence_boost = convergence_boost

    def score(
        self,
        signals: Sequence[Signal],
        themes: Any,
        now: Optional[datetime] = None,
    ) -> List[ThemeResult]:
        """
        Match signals to themes and compute priority scores.

        Args:
            signals: Normalized, redacted signals
            themes: Theme definitions (ThemeDefinition list or dicts)
            now: Reference time for recency decay (default: current UTC time)

        Returns:
            ThemeResult list for themes with >= 1 match, highest priority first.
            Ties keep theme-definition order.

        Raises:
            ConfigurationError: if the theme list is malformed
        """
        definitions = coerce_theme_definitions(themes)
        matches = match_signals(signals, definitions)
        return self.score_matches(matches, definitions, now=now)

    def score_matches(
        self,
        matches: ThemeMatches,
        themes: Any,
        now: Optional[datetime] = None,
    ) -> List[ThemeResult]:
        """Score an existing match set (lets callers reuse the unmatched list)."""
        definitions = coerce_theme_definitions(themes)
        now = now or datetime.now(timezone.utc)

        breakdowns: Dict[str, ThemeScoreBreakdown] = {}
        for theme in definitions:
            matched = matches.matched.get(theme.id, [])
            if not matched:
                continue
            breakdowns[theme.id] = self._build_breakdown(theme.id, matched, now)

        if not breakdowns:
            return []

        max_frequency = max(b.frequency for b in breakdowns.values())
        max_vote_momentum = max(b.raw_vote_momentum for b in breakdowns.values())

        results = []
        for theme in definitions:
            breakdown = breakdowns.get(theme.id)
            if breakdown is None:
                continue

            frequency_score = normalize_to_scale(breakdown.frequency, max_frequency)
            vote_momentum_score = normalize_to_scale(
                breakdown.raw_vote_momentum, max_vote_momentum
            )
            boost = self.convergence_boost if breakdown.convergent else 1.0

            results.append(ThemeResult(
                theme_id=theme.id,
                label=theme.label,
                category=theme.category,
                reactive_count=breakdown.reactive_count,
                proactive_count=breakdown.proactive_count,
                convergent=breakdown.convergent,
                frequency_score=round(frequency_score, 2),
                severity_score=round(breakdown.severity, 2),
                vote_momentum_score=round(vote_momentum_score, 2),
                priority_score=self._priority(
                    frequency_score, breakdown.severity, vote_momentum_score, boost
                ),
                data_points=[s.to_ref() for s in breakdown.signals],
            ))

        # sorted() is stable, so equal scores stay in definition order
        results = sorted(results, key=lambda r: r.priority_score, reverse=True)
        logger.debug(
            f"Scored {len(results)} themes "
            f"({sum(1 for r in results if r.convergent)} convergent)"
        )
        return results

    def _build_breakdown(
        self, theme_id: str, signals: List[Signal], now: datetime
    ) -> ThemeScoreBreakdown:
        return ThemeScoreBreakdown(
            theme_id=theme_id,
            signals=list(signals),
            reactive_count=sum(1 for s in signals if s.provenance == Provenance.REACTIVE),
            proactive_count=sum(1 for s in signals if s.provenance == Provenance.PROACTIVE),
            severity=compute_severity(signals, now),
            raw_vote_momentum=compute_raw_vote_momentum(signals),
        )

    @staticmethod
    def _priority(
        frequency: float, severity: float, vote_momentum: float, boost: float
    ) -> float:
        """
        Weighted sum times boost.

        The weighted sum is rounded before the boost is applied so a
        convergent score is exactly boost x its unboosted score. Rounding
        after the boost instead can shift a score by 0.01; this order is
        intentional.
        """
        weighted = (
            frequency * FREQUENCY_WEIGHT
            + severity * SEVERITY_WEIGHT
            + vote_momentum * VOTE_MOMENTUM_WEIGHT
        )
        return round(weighted, 2) * boost


def score_themes(
    signals: Sequence[Signal],
    themes: Any,
    now: Optional[datetime] = None,
) -> List[ThemeResult]:
    """Module-level shortcut for ThemeScorer().score()."""
    return ThemeScorer().score(signals, themes, now=now)
