"""Item alias SQLAlchemy model.

Stores human-confirmed alias strings (normalized receipt/label text or
supplier codes) for inventory items. Serves as the learning loop for the
matching engine.
"""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base


class ItemAlias(Base):
    """Confirmed alias -> inventory item mapping.

    Within one organization a normalized alias maps to at most one item
    (unique org_id + alias_text). A newer confirmation overwrites the item;
    superseded mappings are not kept.

    Source values: barcode, photo, manual, receipt
    """
    __tablename__ = "item_alias"
    __table_args__ = (
        UniqueConstraint("org_id", "alias_text", name="uq_item_alias_org_text"),
        Index("ix_item_alias_org_id_catalog_item_id", "org_id", "catalog_item_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, nullable=False)

    alias_text = Column(Text, nullable=False)  # Normalized key
    raw_text_sample = Column(Text, nullable=True)  # Last raw text seen for reference
    catalog_item_id = Column(Uuid, ForeignKey("inventory_item.id", ondelete="CASCADE"), nullable=False)
    source = Column(Text, nullable=False)

    # Learning metrics
    support_count = Column(Integer, nullable=False, default=1, server_default="1")  # Times confirmed
    last_used_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    item = relationship("InventoryItem")
