"""
Keyword theme matching.

A theme matches a signal if ANY of its keywords matches:
- Keywords containing a space are case-insensitive substrings of the text.
- Single-token keywords must match as a whole word, so "bug" does not match
  "debugging".

Matching is not exclusive: one signal can land in several themes. Predicates
here are stateless; no scan position carries over between calls.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from pydantic import ValidationError

from .config import ConfigurationError
from .models import Signal, ThemeDefinition

logger = logging.getLogger(__name__)


@dataclass
class ThemeMatches:
    """Signals grouped per theme, plus the signals no theme claimed."""

    # theme id -> matched signals, in theme-definition order
    matched: Dict[str, List[Signal]] = field(default_factory=dict)
    unmatched: List[Signal] = field(default_factory=list)


def keyword_matches(text: str, keyword: str) -> bool:
    """Check a single keyword against lower-cased signal text."""
    if " " in keyword:
        return keyword.lower() in text.lower()
    return re.search(rf"\b{re.escape(keyword)}\b", text, re.IGNORECASE) is not None


def matches_theme(text: str, keywords: Sequence[str]) -> bool:
    """True if any keyword matches."""
    return any(keyword_matches(text, kw) for kw in keywords)


def coerce_theme_definitions(themes: Any) -> List[ThemeDefinition]:
    """
    Validate a theme list handed straight to the matcher or scorer.

    Accepts ThemeDefinition instances or plain dicts.

    Raises:
        ConfigurationError: if themes is not a list or an entry is malformed
    """
    if not isinstance(themes, (list, tuple)):
        raise ConfigurationError(
            f"Theme definitions must be a list, got {type(themes).__name__}"
        )

    definitions = []
    for index, theme in enumerate(themes):
        if isinstance(theme, ThemeDefinition):
            definitions.append(theme)
            continue
        try:
            definitions.append(ThemeDefinition.model_validate(theme))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid theme definition at index {index}: {e}") from e
    return definitions


def match_signals(signals: Sequence[Signal], themes: Any) -> ThemeMatches:
    """
    Match every signal against every theme.

    Args:
        signals: Normalized signals
        themes: Theme definitions (list of ThemeDefinition or dicts)

    Returns:
        ThemeMatches with an entry (possibly empty) for every theme
    """
    definitions = coerce_theme_definitions(themes)
    result = ThemeMatches(matched={t.id: [] for t in definitions})

    for signal in signals:
        hit = False
        for theme in definitions:
            if matches_theme(signal.text, theme.keywords):
                result.matched[theme.id].append(signal)
                hit = True
        if not hit:
            result.unmatched.append(signal)

    logger.debug(
        f"Matched {len(signals) - len(result.unmatched)}/{len(signals)} signals "
        f"against {len(definitions)} themes"
    )
    return result
