"""Alias store implementations.

Both stores apply learn/upsert as a single atomic operation per
(org_id, alias_text) key, so concurrent confirmations resolve last-write-wins
without application-level locking around match().
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Hashable, List, Optional, Tuple
from uuid import UUID, uuid4

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from ..domain.matching.models import AliasSource
from ..models.item_alias import ItemAlias
from ..observability.logging_config import get_logger
from .ports import AliasStorePort, MatcherError

logger = get_logger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


@dataclass
class AliasRecord:
    item_id: str
    raw_text: Optional[str]
    source: AliasSource
    support_count: int
    last_used_at: datetime


class InMemoryAliasStore(AliasStorePort):
    """Process-local alias store.

    Suitable for tests, scripts and single-process embedding. Writes are
    guarded by a lock; reads see the latest write immediately.
    """

    def __init__(self):
        self._aliases: Dict[Tuple[Hashable, str], AliasRecord] = {}
        self._lock = threading.Lock()

    def get_alias(self, org_id: Hashable, alias_text: str) -> Optional[str]:
        record = self._aliases.get((org_id, alias_text))
        return record.item_id if record else None

    def put_alias(
        self,
        org_id: Hashable,
        alias_text: str,
        item_id: str,
        raw_text: Optional[str] = None,
        source: AliasSource = AliasSource.MANUAL,
    ) -> None:
        now = datetime.now(timezone.utc)
        with self._lock:
            existing = self._aliases.get((org_id, alias_text))
            self._aliases[(org_id, alias_text)] = AliasRecord(
                item_id=item_id,
                raw_text=raw_text if raw_text is not None else (existing.raw_text if existing else None),
                source=source,
                support_count=existing.support_count + 1 if existing else 1,
                last_used_at=now,
            )

    def get_record(self, org_id: Hashable, alias_text: str) -> Optional[AliasRecord]:
        return self._aliases.get((org_id, alias_text))

    def __len__(self) -> int:
        return len(self._aliases)


class SqlAliasStore(AliasStorePort):
    """Alias store backed by the item_alias table.

    Upserts use INSERT ... ON CONFLICT (org_id, alias_text) DO UPDATE, which is
    atomic on both PostgreSQL and SQLite. Each write is committed immediately
    so the next receipt line sees it.
    """

    def __init__(self, db: Session):
        """Initialize alias store.

        Args:
            db: Database session
        """
        self.db = db

    def get_alias(self, org_id: UUID, alias_text: str) -> Optional[str]:
        row = self.db.query(ItemAlias.catalog_item_id).filter(
            ItemAlias.org_id == org_id,
            ItemAlias.alias_text == alias_text
        ).first()

        if not row:
            return None
        return str(row[0])

    def put_alias(
        self,
        org_id: UUID,
        alias_text: str,
        item_id: str,
        raw_text: Optional[str] = None,
        source: AliasSource = AliasSource.MANUAL,
    ) -> None:
        insert = self._insert_for_dialect()
        now = datetime.now(timezone.utc)

        stmt = insert(ItemAlias).values(
            id=uuid4(),
            org_id=org_id,
            alias_text=alias_text,
            raw_text_sample=raw_text,
            catalog_item_id=UUID(str(item_id)),
            source=source.value,
            support_count=1,
            last_used_at=now,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[ItemAlias.org_id, ItemAlias.alias_text],
            set_={
                "catalog_item_id": stmt.excluded.catalog_item_id,
                "raw_text_sample": func.coalesce(stmt.excluded.raw_text_sample, ItemAlias.raw_text_sample),
                "source": stmt.excluded.source,
                "support_count": ItemAlias.support_count + 1,
                "last_used_at": stmt.excluded.last_used_at,
                "updated_at": stmt.excluded.updated_at,
            },
        )

        try:
            self.db.execute(stmt)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def list_aliases(self, org_id: UUID) -> List[ItemAlias]:
        """List learned aliases for an organization, most recently used first."""
        return self.db.query(ItemAlias).filter(
            ItemAlias.org_id == org_id
        ).order_by(
            ItemAlias.last_used_at.desc(),
            ItemAlias.alias_text
        ).all()

    def _insert_for_dialect(self):
        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise MatcherError(f"Alias upsert not supported for dialect: {dialect}")
        return insert
