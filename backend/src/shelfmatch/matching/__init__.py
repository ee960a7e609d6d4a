"""Matching module for ShelfMatch.

Implements the receipt/barcode matching pipeline:
- Barcode lookup (GTIN normalized)
- Confirmed aliases (learning loop)
- Fuzzy similarity (Levenshtein + token overlap)
"""

from .alias_store import InMemoryAliasStore, SqlAliasStore
from .orchestrator import MatchOrchestrator, alias_key
from .ports import AliasStorePort, CatalogItemNotFoundError, MatcherError

__all__ = [
    "AliasStorePort",
    "CatalogItemNotFoundError",
    "InMemoryAliasStore",
    "MatchOrchestrator",
    "MatcherError",
    "SqlAliasStore",
    "alias_key",
]
