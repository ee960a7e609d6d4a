"""Matching domain: normalization, scoring, confidence tiers and barcodes."""

from .barcode import (
    BarcodeInfo,
    check_digit_valid,
    describe_barcode,
    is_supported_length,
    normalize_barcode,
)
from .confidence import CONFIDENCE_THRESHOLDS, confidence_to_status, score_to_confidence
from .models import (
    AliasSource,
    CatalogItem,
    LineStatus,
    MatchConfidence,
    MatchOutcome,
    MatchProfile,
    MatchResult,
    MatchSource,
    QueryType,
    ScoredCandidate,
)
from .normalizer import ABBREVIATIONS, extract_line_code, normalize
from .similarity import character_similarity, similarity, token_overlap

__all__ = [
    "ABBREVIATIONS",
    "AliasSource",
    "BarcodeInfo",
    "CONFIDENCE_THRESHOLDS",
    "CatalogItem",
    "LineStatus",
    "MatchConfidence",
    "MatchOutcome",
    "MatchProfile",
    "MatchResult",
    "MatchSource",
    "QueryType",
    "ScoredCandidate",
    "character_similarity",
    "check_digit_valid",
    "confidence_to_status",
    "describe_barcode",
    "extract_line_code",
    "is_supported_length",
    "normalize",
    "normalize_barcode",
    "score_to_confidence",
    "similarity",
    "token_overlap",
]
