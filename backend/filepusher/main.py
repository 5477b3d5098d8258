"""
File Pusher service wiring.

build_runtime() assembles every component from settings; create_app() exposes
the read-only monitoring API over a runtime.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from fastapi import FastAPI

from .archive.engine import ArchiveEngine
from .catalog.catalog import ItemCatalog
from .checksum.service import ChecksumService
from .config.settings import FilePusherSettings
from .items.service import ItemService
from .monitoring import server as monitoring
from .persistence.manager import PersistenceManager
from .watchfolders.engine import WatchFolderEngine
from .watchfolders.models import WatchFolder
from .watchfolders.scheduler import ScanScheduler
from .watchfolders.stability import StabilityTracker

logger = logging.getLogger(__name__)


@dataclass
class FilePusherRuntime:
    """All long-lived components of a running service."""

    settings: FilePusherSettings
    catalog: ItemCatalog
    checksum_service: ChecksumService
    tracker: StabilityTracker
    archive_engine: ArchiveEngine
    engine: WatchFolderEngine
    scheduler: ScanScheduler

    def shutdown(self, wait: bool = True) -> None:
        """Stop scanning, then let running checksum and archive work finish."""
        self.scheduler.stop()
        self.checksum_service.shutdown(wait=wait)
        self.archive_engine.shutdown(wait=wait)
        self.catalog.save()


def build_runtime(
    settings: FilePusherSettings,
    persistence_manager: Optional[PersistenceManager] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> FilePusherRuntime:
    """
    Assemble a runtime from settings.

    The catalog is loaded from persistence before anything is scanned.

    Args:
        settings: Validated configuration
        persistence_manager: Storage to use (default: SQLite at catalog.dbPath)
        clock: Time source shared by tracker and checksum service
    """
    if persistence_manager is None:
        persistence_manager = PersistenceManager(db_path=settings.catalog_db_path)

    catalog = ItemCatalog(persistence_manager=persistence_manager)
    catalog.load()

    checksum_service = ChecksumService(
        catalog=catalog,
        max_workers=settings.checksum_max_workers,
        clock=clock,
    )
    tracker = StabilityTracker(
        catalog=catalog,
        item_service=ItemService(),
        checksum_service=checksum_service,
        cooldown_seconds=settings.file_change_cooldown_seconds,
        clock=clock,
    )
    archive_engine = ArchiveEngine.from_settings(settings)
    engine = WatchFolderEngine(
        watch_folders=[WatchFolder(path=path) for path in settings.watched_folders],
        tracker=tracker,
        archive_engine=archive_engine,
    )
    scheduler = ScanScheduler(engine, interval_seconds=settings.scan_interval_seconds)

    return FilePusherRuntime(
        settings=settings,
        catalog=catalog,
        checksum_service=checksum_service,
        tracker=tracker,
        archive_engine=archive_engine,
        engine=engine,
        scheduler=scheduler,
    )


def create_app(runtime: FilePusherRuntime) -> FastAPI:
    """Create the monitoring app over a runtime."""
    app = FastAPI(title="File Pusher", version="0.3.0")

    app.state.catalog = runtime.catalog
    app.state.archive_engine = runtime.archive_engine
    app.state.scheduler = runtime.scheduler

    app.include_router(monitoring.router)
    return app
