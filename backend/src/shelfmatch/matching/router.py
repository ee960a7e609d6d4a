"""Matching API endpoints.

Match receipt text or barcodes against the caller's catalog, confirm matches
(learning loop) and list learned aliases.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from uuid import UUID

from ..catalog.repository import CatalogRepository
from ..config import Settings, get_settings
from ..database import get_db
from ..dependencies import get_org_id
from ..domain.matching.confidence import confidence_to_status
from ..domain.matching.models import MatchProfile, MatchResult
from ..models.item_alias import ItemAlias
from ..observability.logging_config import get_logger
from .alias_store import SqlAliasStore
from .orchestrator import MatchOrchestrator, alias_key
from .ports import CatalogItemNotFoundError
from .schemas import (
    ConfirmMatchRequest,
    ConfirmMatchResponse,
    ItemAliasListResponse,
    ItemAliasSchema,
    MatchBatchRequest,
    MatchBatchResponse,
    MatchCandidateSchema,
    MatchRequest,
    MatchResultSchema,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/matching", tags=["matching"])


def get_alias_store(db: Session = Depends(get_db)) -> SqlAliasStore:
    return SqlAliasStore(db)


def get_orchestrator(
    alias_store: SqlAliasStore = Depends(get_alias_store),
    settings: Settings = Depends(get_settings),
) -> MatchOrchestrator:
    return MatchOrchestrator(alias_store, candidate_limit=settings.MATCH_CANDIDATE_LIMIT)


def _to_schema(result: MatchResult, profile: MatchProfile) -> MatchResultSchema:
    return MatchResultSchema(
        outcome=result.outcome,
        item_id=result.item.id if result.item else None,
        item_name=result.item.name if result.item else None,
        score=result.score,
        confidence=result.confidence,
        status=confidence_to_status(result.confidence, profile),
        normalized_query=result.normalized_query,
        match_source=result.match_source,
        barcode_check_digit_valid=result.barcode_check_digit_valid,
        barcode_supported_length=result.barcode_supported_length,
        candidates=[
            MatchCandidateSchema(
                item_id=c.item.id,
                item_name=c.item.name,
                score=c.score,
                confidence=c.confidence,
                match_source=c.source,
            )
            for c in result.candidates
        ],
    )


def _resolve_profile(requested, settings: Settings) -> MatchProfile:
    return requested or MatchProfile(settings.DEFAULT_MATCH_PROFILE)


@router.post("/match", response_model=MatchResultSchema)
def match(
    request: MatchRequest,
    org_id: UUID = Depends(get_org_id),
    db: Session = Depends(get_db),
    orchestrator: MatchOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_settings),
):
    """Match one receipt line or scanned barcode.

    "No match" is a normal outcome (outcome=none), never an error.

    Args:
        request: Text or barcode query
        org_id: Tenant from X-Org-ID
        db: Database session
        orchestrator: Match orchestrator
        settings: Application settings

    Returns:
        MatchResultSchema with decision, tier, line status and ranked candidates
    """
    candidates = CatalogRepository(db).load_candidates(org_id)
    result = orchestrator.match(org_id, request.query, candidates, request.query_type)
    return _to_schema(result, _resolve_profile(request.profile, settings))


@router.post("/match-batch", response_model=MatchBatchResponse)
def match_batch(
    request: MatchBatchRequest,
    org_id: UUID = Depends(get_org_id),
    db: Session = Depends(get_db),
    orchestrator: MatchOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_settings),
):
    """Match all OCR lines of a receipt against one catalog snapshot.

    Results are returned in the order of the submitted lines.
    """
    candidates = CatalogRepository(db).load_candidates(org_id)
    profile = _resolve_profile(request.profile, settings)

    results = orchestrator.match_batch(org_id, [line.raw_text for line in request.lines], candidates)
    return MatchBatchResponse(results=[_to_schema(result, profile) for result in results])


@router.post("/confirm", response_model=ConfirmMatchResponse)
def confirm_match(
    request: ConfirmMatchRequest,
    org_id: UUID = Depends(get_org_id),
    db: Session = Depends(get_db),
    orchestrator: MatchOrchestrator = Depends(get_orchestrator),
):
    """Confirm a match and learn the query as an alias (learning loop).

    The newest confirmation for a normalized query overwrites any earlier one.

    Raises:
        CatalogItemNotFoundError: Item does not exist in the caller's catalog (404)
        HTTPException 422: Query normalizes to empty text
    """
    item = CatalogRepository(db).get_item(org_id, request.item_id)
    if item is None:
        raise CatalogItemNotFoundError(str(request.item_id))

    if not alias_key(request.query, request.query_type):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Query contains no matchable text",
        )

    key = orchestrator.confirm_match(
        org_id,
        request.query,
        item,
        query_type=request.query_type,
        source=request.source,
    )

    alias = db.query(ItemAlias).filter(
        ItemAlias.org_id == org_id,
        ItemAlias.alias_text == key
    ).one()

    message = "Alias created" if alias.support_count == 1 else "Alias updated"
    return ConfirmMatchResponse(alias=ItemAliasSchema.model_validate(alias), message=message)


@router.get("/aliases", response_model=ItemAliasListResponse)
def list_aliases(
    org_id: UUID = Depends(get_org_id),
    alias_store: SqlAliasStore = Depends(get_alias_store),
):
    """List learned aliases for the caller's organization."""
    aliases = alias_store.list_aliases(org_id)
    return ItemAliasListResponse(
        items=[ItemAliasSchema.model_validate(alias) for alias in aliases],
        total=len(aliases),
    )
