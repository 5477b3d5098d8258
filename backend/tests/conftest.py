"""
Shared fixtures for File Pusher tests.
"""

from pathlib import Path

import pytest

from filepusher.catalog.catalog import ItemCatalog
from filepusher.items.service import ItemService
from filepusher.persistence.manager import PersistenceManager
from filepusher.watchfolders.stability import StabilityTracker
from tests.helpers import FakeClock, InlineChecksumService


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def watch_root(tmp_path: Path) -> Path:
    root = tmp_path / "watch"
    root.mkdir()
    return root


@pytest.fixture
def persistence(tmp_path: Path) -> PersistenceManager:
    return PersistenceManager(db_path=str(tmp_path / "catalog.db"))


@pytest.fixture
def catalog(persistence: PersistenceManager) -> ItemCatalog:
    return ItemCatalog(persistence_manager=persistence)


@pytest.fixture
def checksum_service(catalog, clock):
    service = InlineChecksumService(catalog=catalog, clock=clock)
    yield service
    service.shutdown()


@pytest.fixture
def tracker(catalog, checksum_service, clock) -> StabilityTracker:
    return StabilityTracker(
        catalog=catalog,
        item_service=ItemService(),
        checksum_service=checksum_service,
        cooldown_seconds=60,
        clock=clock,
    )
