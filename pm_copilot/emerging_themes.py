"""
Emerging theme detection.

Runs over the signals that matched no configured theme and surfaces
recurring short phrases, so an operator can spot a gap in the theme list.

Algorithm:
1. Tokenize: lower-case, non-alphanumerics to spaces, drop tokens of
   length <= 2 and stop words.
2. Collect distinct bigrams and trigrams per signal (a signal contains an
   n-gram; repeats inside one signal do not add counts).
3. Keep n-grams found in at least min_frequency signals.
4. Walk them from most to least frequent, greedily claiming signals. An
   n-gram is emitted only if it still has >= min_frequency unclaimed
   signals, and it claims exactly those.

No signal ends up in two emerging themes.
"""

import logging
import re
from typing import Dict, Iterable, List, Sequence, Set

from .models import EmergingTheme, Signal

logger = logging.getLogger(__name__)

MIN_TOKEN_LENGTH = 3
NGRAM_SIZES = (2, 3)

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9\s]")


def tokenize(text: str, stop_words: Iterable[str] = ()) -> List[str]:
    """
    Split text into matching tokens.

    Examples:
        "Dark-mode, please!" -> ["dark", "mode", "please"]
    """
    stop = stop_words if isinstance(stop_words, (set, frozenset)) else set(stop_words)
    cleaned = _NON_ALPHANUMERIC.sub(" ", (text or "").lower())
    return [
        token for token in cleaned.split()
        if len(token) >= MIN_TOKEN_LENGTH and token not in stop
    ]


def extract_ngrams(tokens: Sequence[str]) -> List[str]:
    """All contiguous bigrams, then all trigrams, in token order."""
    ngrams = []
    for size in NGRAM_SIZES:
        for i in range(len(tokens) - size + 1):
            ngrams.append(" ".join(tokens[i:i + size]))
    return ngrams


def index_ngrams(signals: Sequence[Signal], stop_words: Iterable[str]) -> Dict[str, Set[int]]:
    """Map each n-gram to the indices of the signals containing it.

    Dict order is first-seen order, which breaks frequency ties.
    """
    stop = set(stop_words)
    ngram_to_signals: Dict[str, Set[int]] = {}
    for index, signal in enumerate(signals):
        for ngram in dict.fromkeys(extract_ngrams(tokenize(signal.text, stop))):
            ngram_to_signals.setdefault(ngram, set()).add(index)
    return ngram_to_signals


def detect_emerging_themes(
    unmatched_signals: Sequence[Signal],
    stop_words: Iterable[str],
    min_frequency: int,
) -> List[EmergingTheme]:
    """
    Cluster unmatched signals around their most frequent shared phrases.

    Args:
        unmatched_signals: Signals that matched no configured theme
        stop_words: Words ignored during tokenization
        min_frequency: Minimum signals an n-gram must (still) claim

    Returns:
        EmergingTheme list, most frequent first, with disjoint signal sets
    """
    min_frequency = max(int(min_frequency), 1)
    ngram_to_signals = index_ngrams(unmatched_signals, stop_words)

    candidates = sorted(
        ((ngram, indices) for ngram, indices in ngram_to_signals.items()
         if len(indices) >= min_frequency),
        key=lambda item: len(item[1]),
        reverse=True,
    )

    claimed: Set[int] = set()
    emerging = []
    for ngram, indices in candidates:
        unclaimed = sorted(i for i in indices if i not in claimed)
        if len(unclaimed) < min_frequency:
            continue

        claimed.update(unclaimed)
        emerging.append(EmergingTheme(
            ngram=ngram,
            frequency=len(unclaimed),
            data_points=[unmatched_signals[i].to_ref() for i in unclaimed],
        ))

    logger.debug(
        f"Found {len(emerging)} emerging themes across "
        f"{len(unmatched_signals)} unmatched signals"
    )
    return emerging
