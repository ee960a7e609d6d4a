"""Catalog provider: assembles a tenant's match candidate set.

Returns read-only CatalogItem snapshots; the engine never mutates catalog rows.
"""

from collections import defaultdict
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from ..domain.matching.models import CatalogItem
from ..models.inventory_item import InventoryItem
from ..models.item_alias import ItemAlias


class CatalogRepository:
    """Read access to inventory items, barcodes and aliases for one session."""

    def __init__(self, db: Session):
        self.db = db

    def load_candidates(self, org_id: UUID) -> List[CatalogItem]:
        """Load all active items of an organization as match candidates.

        Items are ordered by creation time (then id) so fuzzy ties resolve the
        same way on every call.

        Args:
            org_id: Organization UUID

        Returns:
            Ordered candidate set
        """
        items = self.db.query(InventoryItem).options(
            selectinload(InventoryItem.barcodes)
        ).filter(
            InventoryItem.org_id == org_id,
            InventoryItem.active.is_(True)
        ).order_by(
            InventoryItem.created_at,
            InventoryItem.id
        ).all()

        aliases = self._aliases_by_item(org_id)
        return [self._to_candidate(item, aliases.get(item.id, [])) for item in items]

    def get_item(self, org_id: UUID, item_id: UUID) -> Optional[CatalogItem]:
        """Fetch a single active item of an organization (None if missing or inactive)."""
        item = self.db.query(InventoryItem).options(
            selectinload(InventoryItem.barcodes)
        ).filter(
            InventoryItem.org_id == org_id,
            InventoryItem.id == item_id,
            InventoryItem.active.is_(True)
        ).first()

        if not item:
            return None

        aliases = self.db.query(ItemAlias.alias_text).filter(
            ItemAlias.org_id == org_id,
            ItemAlias.catalog_item_id == item.id
        ).order_by(ItemAlias.created_at, ItemAlias.alias_text).all()
        return self._to_candidate(item, [row[0] for row in aliases])

    def _aliases_by_item(self, org_id: UUID) -> Dict[UUID, List[str]]:
        rows = self.db.query(ItemAlias.catalog_item_id, ItemAlias.alias_text).filter(
            ItemAlias.org_id == org_id
        ).order_by(ItemAlias.created_at, ItemAlias.alias_text).all()

        aliases: Dict[UUID, List[str]] = defaultdict(list)
        for item_id, alias_text in rows:
            aliases[item_id].append(alias_text)
        return aliases

    @staticmethod
    def _to_candidate(item: InventoryItem, aliases: List[str]) -> CatalogItem:
        return CatalogItem(
            id=str(item.id),
            name=item.name,
            barcodes=tuple(barcode.code for barcode in item.barcodes),
            aliases=tuple(aliases),
        )
