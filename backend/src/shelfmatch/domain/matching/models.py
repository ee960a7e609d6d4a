"""Domain models for catalog matching.

Plain dataclasses and string enums shared by the normalizer, scorer,
classifier and orchestrator. Nothing here touches the database.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .barcode import BarcodeInfo


class MatchOutcome(str, Enum):
    """How a match decision was reached."""
    EXACT_ALIAS = "exact_alias"
    EXACT_BARCODE = "exact_barcode"
    FUZZY = "fuzzy"
    NONE = "none"


class MatchConfidence(str, Enum):
    """User-facing confidence tier, ordered exact > high > medium > low > none."""
    EXACT = "exact"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"

    @property
    def rank(self) -> int:
        """Numeric ordering of the tier (higher is more certain)."""
        return _CONFIDENCE_RANK[self]

    def at_least(self, other: "MatchConfidence") -> bool:
        return self.rank >= other.rank


_CONFIDENCE_RANK = {
    MatchConfidence.EXACT: 4,
    MatchConfidence.HIGH: 3,
    MatchConfidence.MEDIUM: 2,
    MatchConfidence.LOW: 1,
    MatchConfidence.NONE: 0,
}


class MatchSource(str, Enum):
    """Which known string produced the winning score."""
    BARCODE = "barcode"
    ALIAS = "alias"
    LINE_CODE_ALIAS = "line_code_alias"
    FUZZY_NAME = "fuzzy_name"
    FUZZY_ALIAS = "fuzzy_alias"


class QueryType(str, Enum):
    TEXT = "text"
    BARCODE = "barcode"


class AliasSource(str, Enum):
    """Workflow in which an alias was confirmed."""
    BARCODE = "barcode"
    PHOTO = "photo"
    MANUAL = "manual"
    RECEIPT = "receipt"


class MatchProfile(str, Enum):
    """Caller workflow, decides how much confidence counts as resolved.

    - RECEIPT: medium confidence is offered as a suggestion
    - SHOPPING: only high confidence (or better) counts
    """
    RECEIPT = "receipt"
    SHOPPING = "shopping"


class LineStatus(str, Enum):
    MATCHED = "matched"
    SUGGESTED = "suggested"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class CatalogItem:
    """Tenant-scoped inventory item visible to one matching call.

    Attributes:
        id: Opaque, stable item identifier
        name: Display name (free text)
        barcodes: Known barcodes for the item
        aliases: Learned alias strings (already normalized)
    """
    id: str
    name: str
    barcodes: Tuple[str, ...] = ()
    aliases: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ScoredCandidate:
    """One catalog item with its best fuzzy score."""
    item: CatalogItem
    score: float
    confidence: MatchConfidence
    source: MatchSource


@dataclass(frozen=True)
class MatchResult:
    """Immutable result of a matching call.

    Attributes:
        outcome: exact_alias | exact_barcode | fuzzy | none
        item: Matched catalog item (None when outcome is none)
        score: Raw score (0.0-1.0)
        confidence: Confidence tier derived from score
        normalized_query: Normalized query that was matched
        match_source: Known string that produced the match
        candidates: Top ranked fuzzy candidates for review
        barcode: Normalized barcode details (barcode queries only)
    """
    outcome: MatchOutcome
    item: Optional[CatalogItem]
    score: float
    confidence: MatchConfidence
    normalized_query: str
    match_source: Optional[MatchSource] = None
    candidates: Tuple[ScoredCandidate, ...] = field(default_factory=tuple)
    barcode: Optional[BarcodeInfo] = None

    @property
    def is_match(self) -> bool:
        return self.item is not None

    @property
    def barcode_check_digit_valid(self) -> Optional[bool]:
        return self.barcode.check_digit_valid if self.barcode else None

    @property
    def barcode_supported_length(self) -> Optional[bool]:
        return self.barcode.supported_length if self.barcode else None

    @classmethod
    def no_match(
        cls,
        normalized_query: str,
        barcode: Optional[BarcodeInfo] = None,
    ) -> "MatchResult":
        return cls(
            outcome=MatchOutcome.NONE,
            item=None,
            score=0.0,
            confidence=MatchConfidence.NONE,
            normalized_query=normalized_query,
            barcode=barcode,
        )
