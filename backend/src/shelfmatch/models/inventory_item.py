"""Inventory item and barcode SQLAlchemy models.

These tables belong to catalog management; the matching engine only reads them.
"""

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base


class InventoryItem(Base):
    """Tenant-scoped inventory item (catalog entry).

    Each item belongs to one organization. Inactive items are never offered as
    match candidates.
    """
    __tablename__ = "inventory_item"
    __table_args__ = (
        Index("ix_inventory_item_org_id", "org_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, nullable=False)
    name = Column(Text, nullable=False)
    active = Column(Boolean, nullable=False, default=True, server_default="1")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    barcodes = relationship(
        "ItemBarcode",
        back_populates="item",
        cascade="all, delete-orphan",
        order_by="ItemBarcode.created_at",
    )


class ItemBarcode(Base):
    """Barcode (or opaque supplier code) attached to one inventory item.

    A code is unique per organization. The stored code is already normalized
    (separators stripped); check-digit validity is not enforced.
    """
    __tablename__ = "item_barcode"
    __table_args__ = (
        UniqueConstraint("org_id", "code", name="uq_item_barcode_org_code"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, nullable=False)
    item_id = Column(Uuid, ForeignKey("inventory_item.id", ondelete="CASCADE"), nullable=False)
    code = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    item = relationship("InventoryItem", back_populates="barcodes")
