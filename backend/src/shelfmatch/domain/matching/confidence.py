"""Confidence classification for match scores.

The thresholds are fixed constants and are the single place that encodes how
sure is sure enough. Callers compare tiers, never raw scores.

| Tier   | Lower bound (inclusive) | Meaning                         |
|--------|-------------------------|---------------------------------|
| exact  | 1.00                    | Identical string/barcode/alias  |
| high   | 0.80                    | Safe to auto-assign             |
| medium | 0.50                    | Suggest, quick confirm          |
| low    | 0.20                    | Show as option, require input   |
| none   | -                       | Do not auto-apply               |
"""

from typing import Tuple

from .models import LineStatus, MatchConfidence, MatchProfile

CONFIDENCE_THRESHOLDS: Tuple[Tuple[float, MatchConfidence], ...] = (
    (1.0, MatchConfidence.EXACT),
    (0.8, MatchConfidence.HIGH),
    (0.5, MatchConfidence.MEDIUM),
    (0.2, MatchConfidence.LOW),
)


def score_to_confidence(score: float) -> MatchConfidence:
    """Map a raw score to a confidence tier.

    Args:
        score: Raw similarity score (0.0-1.0)

    Returns:
        Highest tier whose lower bound the score reaches
    """
    for lower_bound, tier in CONFIDENCE_THRESHOLDS:
        if score >= lower_bound:
            return tier
    return MatchConfidence.NONE


def confidence_to_status(
    confidence: MatchConfidence,
    profile: MatchProfile = MatchProfile.RECEIPT,
) -> LineStatus:
    """Decide whether a line counts as matched, suggested or unresolved.

    Args:
        confidence: Tier of the top match
        profile: Calling workflow

    Returns:
        LineStatus for the line
    """
    if confidence.at_least(MatchConfidence.HIGH):
        return LineStatus.MATCHED
    if profile == MatchProfile.RECEIPT and confidence == MatchConfidence.MEDIUM:
        return LineStatus.SUGGESTED
    return LineStatus.UNRESOLVED
