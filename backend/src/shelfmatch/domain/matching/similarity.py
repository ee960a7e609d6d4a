"""String similarity scoring for normalized text.

Combines two signals:
- Character similarity: normalized Levenshtein, 1 - distance / max(len(a), len(b)).
  Captures OCR character noise ("ketchp" vs "ketchup", "0" vs "o").
- Token overlap: Jaccard over word sets. Captures reordering and partial
  matches ("cola coca 2 l" vs "coca cola 2 l").

score = clamp(0.7 * character + 0.3 * token, 0..1)

Both inputs are expected to be normalize()d already.
"""

from typing import FrozenSet

from rapidfuzz.distance import Levenshtein

CHARACTER_WEIGHT = 0.7
TOKEN_WEIGHT = 0.3


def _tokens(value: str) -> FrozenSet[str]:
    return frozenset(token for token in value.split(" ") if token)


def character_similarity(a: str, b: str) -> float:
    """Normalized Levenshtein similarity (0.0-1.0)."""
    if not a or not b:
        return 0.0
    return Levenshtein.normalized_similarity(a, b)


def token_overlap(a: str, b: str) -> float:
    """Jaccard similarity over whitespace-separated tokens (0.0-1.0)."""
    tokens_a = _tokens(a)
    tokens_b = _tokens(b)
    if not tokens_a or not tokens_b:
        return 0.0
    return len(tokens_a & tokens_b) / len(tokens_a | tokens_b)


def similarity(a: str, b: str) -> float:
    """Blended similarity between two normalized strings.

    Symmetric, and 1.0 for identical non-empty strings.

    Args:
        a: First normalized string
        b: Second normalized string

    Returns:
        Score between 0.0 and 1.0 (0.0 if either side is empty)
    """
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0

    score = CHARACTER_WEIGHT * character_similarity(a, b) + TOKEN_WEIGHT * token_overlap(a, b)
    return max(0.0, min(1.0, score))
