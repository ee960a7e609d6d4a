"""Pydantic schemas for matching endpoints."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from ..domain.matching.models import (
    AliasSource,
    LineStatus,
    MatchConfidence,
    MatchOutcome,
    MatchProfile,
    MatchSource,
    QueryType,
)


class MatchRequest(BaseModel):
    """Match request carrying either free text or a barcode (exactly one)."""
    text: Optional[str] = None
    barcode: Optional[str] = None
    profile: Optional[MatchProfile] = None

    @model_validator(mode="after")
    def exactly_one_query(self):
        if (self.text is None) == (self.barcode is None):
            raise ValueError("Provide exactly one of 'text' or 'barcode'")
        return self

    @property
    def query(self) -> str:
        return self.text if self.text is not None else self.barcode

    @property
    def query_type(self) -> QueryType:
        return QueryType.TEXT if self.text is not None else QueryType.BARCODE


class OcrLine(BaseModel):
    """One recognized region from the OCR producer; only raw_text is used."""
    raw_text: str
    confidence_labels: Optional[List[str]] = None


class MatchBatchRequest(BaseModel):
    """Batch of receipt lines matched against one catalog snapshot."""
    lines: List[OcrLine] = Field(min_length=1, max_length=500)
    profile: Optional[MatchProfile] = None


class MatchCandidateSchema(BaseModel):
    """Ranked fuzzy candidate for review UIs."""
    item_id: str
    item_name: str
    score: float = Field(ge=0.0, le=1.0)
    confidence: MatchConfidence
    match_source: MatchSource


class MatchResultSchema(BaseModel):
    """Result of a matching call."""
    outcome: MatchOutcome
    item_id: Optional[str]
    item_name: Optional[str]
    score: float = Field(ge=0.0, le=1.0)
    confidence: MatchConfidence
    status: LineStatus
    normalized_query: str
    match_source: Optional[MatchSource]
    barcode_check_digit_valid: Optional[bool] = None
    barcode_supported_length: Optional[bool] = None
    candidates: List[MatchCandidateSchema]


class MatchBatchResponse(BaseModel):
    results: List[MatchResultSchema]


class ConfirmMatchRequest(BaseModel):
    """Human confirmation of a match (learning loop)."""
    query: str
    query_type: QueryType = QueryType.TEXT
    item_id: UUID
    source: Optional[AliasSource] = None

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("query must not be blank")
        return v


class ItemAliasSchema(BaseModel):
    """Learned alias."""
    alias_text: str
    catalog_item_id: UUID
    raw_text_sample: Optional[str]
    source: AliasSource
    support_count: int
    last_used_at: Optional[datetime]

    class Config:
        from_attributes = True


class ConfirmMatchResponse(BaseModel):
    """Response after confirming a match."""
    alias: ItemAliasSchema
    message: str


class ItemAliasListResponse(BaseModel):
    items: List[ItemAliasSchema]
    total: int
