"""Persistence port and errors for the matching engine.

The engine depends only on the narrow persistence contract below
(get_alias / put_alias), never on a particular storage technology.
"""

from abc import ABC, abstractmethod
from typing import Hashable, Optional

from ..domain.matching.models import AliasSource


class AliasStorePort(ABC):
    """Port interface for alias persistence.

    Implementations:
    - InMemoryAliasStore: process-local dict, for tests and embedding
    - SqlAliasStore: SQLAlchemy table with single-statement upsert

    Errors raised by an implementation (e.g. SQLAlchemyError) must propagate
    to the caller unchanged.
    """

    @abstractmethod
    def get_alias(self, org_id: Hashable, alias_text: str) -> Optional[str]:
        """Look up the item id for an exact normalized alias.

        Args:
            org_id: Tenant identifier
            alias_text: Normalized alias key

        Returns:
            Catalog item id, or None if no alias exists
        """
        pass

    @abstractmethod
    def put_alias(
        self,
        org_id: Hashable,
        alias_text: str,
        item_id: str,
        raw_text: Optional[str] = None,
        source: AliasSource = AliasSource.MANUAL,
    ) -> None:
        """Atomically upsert an alias; the newest write wins.

        Args:
            org_id: Tenant identifier
            alias_text: Normalized alias key
            item_id: Catalog item id the alias refers to
            raw_text: Raw text sample kept for reference
            source: Workflow that produced the confirmation
        """
        pass


class MatcherError(Exception):
    """Exception raised for matching errors."""
    pass


class CatalogItemNotFoundError(MatcherError):
    """Raised when a confirmation references an item outside the tenant catalog."""

    def __init__(self, item_id: str):
        super().__init__(f"Catalog item not found: {item_id}")
        self.item_id = item_id
