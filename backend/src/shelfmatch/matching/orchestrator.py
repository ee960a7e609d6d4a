"""Match orchestrator combining barcode, alias and fuzzy lookups.

Pipeline (first success wins):
1. Barcode query: exact match against candidate barcodes -> exact_barcode
2. Learned alias for the normalized query (or its receipt line code) -> exact_alias
3. Fuzzy similarity against every candidate name and alias, best per candidate;
   ties keep candidate input order -> fuzzy
4. Empty query or empty candidate set -> none

Learning happens only through confirm_match(); an auto-accepted match is never
written back as an alias.
"""

import time
from typing import Hashable, Iterable, List, Optional, Sequence, Tuple

from ..domain.matching.barcode import BarcodeInfo, describe_barcode, normalize_barcode
from ..domain.matching.confidence import score_to_confidence
from ..domain.matching.models import (
    AliasSource,
    CatalogItem,
    MatchConfidence,
    MatchOutcome,
    MatchResult,
    MatchSource,
    QueryType,
    ScoredCandidate,
)
from ..domain.matching.normalizer import extract_line_code, normalize
from ..domain.matching.similarity import similarity
from ..observability.logging_config import get_logger
from ..observability.metrics import (
    aliases_learned_total,
    barcode_check_digit_total,
    match_confidence_total,
    match_duration_seconds,
    match_requests_total,
    match_score_histogram,
)
from .ports import AliasStorePort

logger = get_logger(__name__)

DEFAULT_CANDIDATE_LIMIT = 5


def alias_key(query: Optional[str], query_type: QueryType = QueryType.TEXT) -> str:
    """Normalized alias key for a query.

    Barcode queries have scanner separators stripped before text
    normalization so that "0123-4567" and "01234567" share one alias.
    """
    if query_type == QueryType.BARCODE:
        return normalize(normalize_barcode(query))
    return normalize(query)


def _find_item(candidates: Sequence[CatalogItem], item_id: str) -> Optional[CatalogItem]:
    for item in candidates:
        if str(item.id) == str(item_id):
            return item
    return None


class MatchOrchestrator:
    """Coordinates alias, barcode and fuzzy lookups into one MatchResult.

    match() has no shared mutable state and is safe to call concurrently;
    only learn_alias()/confirm_match() write, through the alias store.
    """

    def __init__(self, alias_store: AliasStorePort, candidate_limit: int = DEFAULT_CANDIDATE_LIMIT):
        """Initialize orchestrator.

        Args:
            alias_store: Persistence for confirmed aliases
            candidate_limit: Number of ranked fuzzy candidates kept on results
        """
        self.alias_store = alias_store
        self.candidate_limit = candidate_limit

    # ------------------------------------------------------------------
    # Alias store operations
    # ------------------------------------------------------------------

    def lookup_alias(
        self,
        org_id: Hashable,
        normalized_text: str,
        candidates: Sequence[CatalogItem],
    ) -> Optional[CatalogItem]:
        """Exact alias lookup, resolved against the current candidate set.

        An alias pointing at an item that is no longer a candidate (inactive,
        removed) resolves to None so matching can fall through.
        """
        if not normalized_text:
            return None

        item_id = self.alias_store.get_alias(org_id, normalized_text)
        if item_id is None:
            return None

        item = _find_item(candidates, item_id)
        if item is None:
            logger.info(
                "Alias target not in candidate set",
                extra={"org_id": org_id, "item_id": item_id}
            )
        return item

    def learn_alias(
        self,
        org_id: Hashable,
        normalized_text: str,
        item: CatalogItem,
        raw_text: Optional[str] = None,
        source: AliasSource = AliasSource.MANUAL,
    ) -> None:
        """Upsert an alias; the newest confirmation wins. Empty keys are ignored."""
        if not normalized_text:
            return

        self.alias_store.put_alias(
            org_id,
            normalized_text,
            str(item.id),
            raw_text=raw_text,
            source=source,
        )
        aliases_learned_total.labels(source=source.value).inc()
        logger.info(
            f"Learned alias '{normalized_text}'",
            extra={"org_id": org_id, "item_id": item.id}
        )

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def match(
        self,
        org_id: Hashable,
        query: Optional[str],
        candidates: Sequence[CatalogItem],
        query_type: QueryType = QueryType.TEXT,
    ) -> MatchResult:
        """Match a barcode or free-text query against the candidate set.

        Args:
            org_id: Tenant identifier
            query: Raw barcode or text
            candidates: Tenant catalog items; order decides fuzzy ties
            query_type: Whether query is text or a barcode

        Returns:
            MatchResult (outcome none for unusable input, never an exception)
        """
        start = time.perf_counter()
        result = self._match(org_id, query, candidates, query_type)
        match_duration_seconds.observe(time.perf_counter() - start)

        match_requests_total.labels(query_type=query_type.value, outcome=result.outcome.value).inc()
        match_confidence_total.labels(confidence=result.confidence.value).inc()
        if result.outcome == MatchOutcome.FUZZY:
            match_score_histogram.observe(result.score)

        logger.debug(
            "Match decision",
            extra={
                "org_id": org_id,
                "query_type": query_type.value,
                "outcome": result.outcome.value,
                "confidence": result.confidence.value,
                "score": round(result.score, 4),
                "match_source": result.match_source.value if result.match_source else None,
                "item_id": result.item.id if result.item else None,
                "candidate_count": len(candidates),
            }
        )
        return result

    def match_batch(
        self,
        org_id: Hashable,
        queries: Iterable[str],
        candidates: Sequence[CatalogItem],
        query_type: QueryType = QueryType.TEXT,
    ) -> List[MatchResult]:
        """Match multiple receipt lines against one candidate set (same order as inputs)."""
        return [self.match(org_id, query, candidates, query_type) for query in queries]

    def confirm_match(
        self,
        org_id: Hashable,
        query: str,
        item: CatalogItem,
        query_type: QueryType = QueryType.TEXT,
        source: Optional[AliasSource] = None,
    ) -> str:
        """Learn a human-confirmed association between a query and an item.

        Text queries that start with a store line code also learn the code
        itself, so the item resolves exactly when its price changes.

        Args:
            org_id: Tenant identifier
            query: Raw query text or barcode as it was matched
            item: Item the human selected
            query_type: Whether query is text or a barcode
            source: Confirming workflow (defaults from query_type)

        Returns:
            The normalized alias key that was stored ("" if nothing was stored)
        """
        key = alias_key(query, query_type)
        if source is None:
            source = AliasSource.BARCODE if query_type == QueryType.BARCODE else AliasSource.RECEIPT
        self.learn_alias(org_id, key, item, raw_text=query, source=source)

        # The full line carries the price; its line code survives price changes
        if query_type == QueryType.TEXT:
            line_code = extract_line_code(key)
            if line_code and line_code != key:
                self.learn_alias(org_id, line_code, item, raw_text=query, source=source)
        return key

    def _match(
        self,
        org_id: Hashable,
        query: Optional[str],
        candidates: Sequence[CatalogItem],
        query_type: QueryType,
    ) -> MatchResult:
        info: Optional[BarcodeInfo] = None

        if query_type == QueryType.BARCODE:
            info = describe_barcode(query)
            barcode_check_digit_total.labels(result=_check_digit_label(info.check_digit_valid)).inc()

            if not info.normalized or not candidates:
                return MatchResult.no_match(info.normalized, barcode=info)

            item = self._find_by_barcode(info.normalized, candidates)
            if item is not None:
                return MatchResult(
                    outcome=MatchOutcome.EXACT_BARCODE,
                    item=item,
                    score=1.0,
                    confidence=MatchConfidence.EXACT,
                    normalized_query=info.normalized,
                    match_source=MatchSource.BARCODE,
                    barcode=info,
                )

        normalized_query = alias_key(query, query_type)
        if not normalized_query or not candidates:
            return MatchResult.no_match(normalized_query, barcode=info)

        item = self.lookup_alias(org_id, normalized_query, candidates)
        if item is not None:
            return self._exact_alias(item, normalized_query, MatchSource.ALIAS, info)

        if query_type == QueryType.TEXT:
            line_code = extract_line_code(normalized_query)
            if line_code and line_code != normalized_query:
                item = self.lookup_alias(org_id, line_code, candidates)
                if item is not None:
                    return self._exact_alias(item, normalized_query, MatchSource.LINE_CODE_ALIAS, info)

        return self._fuzzy_match(normalized_query, candidates, info)

    def _find_by_barcode(self, barcode: str, candidates: Sequence[CatalogItem]) -> Optional[CatalogItem]:
        for item in candidates:
            for code in item.barcodes:
                if normalize_barcode(code) == barcode:
                    return item
        return None

    def _exact_alias(
        self,
        item: CatalogItem,
        normalized_query: str,
        source: MatchSource,
        barcode: Optional[BarcodeInfo],
    ) -> MatchResult:
        return MatchResult(
            outcome=MatchOutcome.EXACT_ALIAS,
            item=item,
            score=1.0,
            confidence=MatchConfidence.EXACT,
            normalized_query=normalized_query,
            match_source=source,
            barcode=barcode,
        )

    def _fuzzy_match(
        self,
        normalized_query: str,
        candidates: Sequence[CatalogItem],
        barcode: Optional[BarcodeInfo],
    ) -> MatchResult:
        scored: List[ScoredCandidate] = []
        best: Optional[ScoredCandidate] = None

        for item in candidates:
            score, source = self._score_item(normalized_query, item)
            candidate = ScoredCandidate(
                item=item,
                score=score,
                confidence=score_to_confidence(score),
                source=source,
            )
            scored.append(candidate)
            # Strict comparison keeps the first-seen candidate on ties
            if best is None or candidate.score > best.score:
                best = candidate

        if best is None or best.score <= 0.0:
            return MatchResult.no_match(normalized_query, barcode=barcode)

        # sorted() is stable, so equal scores stay in input order
        ranked = sorted((c for c in scored if c.score > 0.0), key=lambda c: c.score, reverse=True)

        return MatchResult(
            outcome=MatchOutcome.FUZZY,
            item=best.item,
            score=best.score,
            confidence=best.confidence,
            normalized_query=normalized_query,
            match_source=best.source,
            candidates=tuple(ranked[:self.candidate_limit]),
            barcode=barcode,
        )

    def _score_item(self, normalized_query: str, item: CatalogItem) -> Tuple[float, MatchSource]:
        """Best score over the item's name and known aliases."""
        best_score = similarity(normalized_query, normalize(item.name))
        best_source = MatchSource.FUZZY_NAME

        for alias in item.aliases:
            score = similarity(normalized_query, normalize(alias))
            if score > best_score:
                best_score = score
                best_source = MatchSource.FUZZY_ALIAS

        return best_score, best_source


def _check_digit_label(valid: Optional[bool]) -> str:
    if valid is None:
        return "unknown"
    return "valid" if valid else "invalid"
