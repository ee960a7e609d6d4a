"""Pytest fixtures for ShelfMatch tests.

Provides reusable test fixtures for:
- In-memory SQLite database session (tables created/dropped per test)
- Test organizations and seeded catalog items
- FastAPI TestClient with get_db overridden

Usage:
    def test_match(client, org_id, seed_items):
        seed_items(org_id, ["Heinz Ketchup 32oz"])
        response = client.post("/api/v1/matching/match", json={"text": "heinz ketchup"},
                               headers={"X-Org-ID": str(org_id)})
        assert response.status_code == 200
"""

import os

# Set environment variables BEFORE any application imports
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timedelta, timezone
from itertools import count
from typing import Callable, Dict, Generator, List, Optional, Sequence
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from shelfmatch.database import build_engine, get_db
from shelfmatch.main import app
from shelfmatch.models import Base, InventoryItem, ItemBarcode

# In-memory SQLite on one shared connection, visible to TestClient threads
test_engine = build_engine("sqlite://")

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

_BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    """
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """TestClient whose requests use the test database session."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def org_id() -> UUID:
    return uuid4()


@pytest.fixture
def other_org_id() -> UUID:
    return uuid4()


@pytest.fixture
def org_headers(org_id: UUID) -> Dict[str, str]:
    return {"X-Org-ID": str(org_id)}


@pytest.fixture
def seed_items(db_session: Session) -> Callable[..., List[InventoryItem]]:
    """Factory fixture creating inventory items (with optional barcodes) for an org.

    Usage:
        ketchup, mayo = seed_items(org_id, ["Heinz Ketchup 32oz", "Heinz Mayo 32oz"])
        cola, = seed_items(org_id, ["Coca Cola 2L"], barcodes={"Coca Cola 2L": ["012345678905"]})
    """

    sequence = count()

    def _seed(
        org: UUID,
        names: Sequence[str],
        barcodes: Optional[Dict[str, List[str]]] = None,
        active: bool = True,
    ) -> List[InventoryItem]:
        barcodes = barcodes or {}
        items = []
        for name in names:
            item = InventoryItem(
                id=uuid4(),
                org_id=org,
                name=name,
                active=active,
                created_at=_BASE_TIME + timedelta(seconds=next(sequence)),
            )
            for code in barcodes.get(name, []):
                item.barcodes.append(ItemBarcode(id=uuid4(), org_id=org, code=code))
            db_session.add(item)
            items.append(item)
        db_session.commit()
        return items

    return _seed
