"""
Query layer for read-only state access.

Wraps ItemCatalog and ArchiveEngine reads. All operations are strictly
read-only.
"""

from typing import Optional

from ..archive.engine import ArchiveEngine
from ..archive.models import ArchiveJob
from ..catalog.catalog import ItemCatalog
from ..items.models import ItemStatus, TrackedItem
from .errors import ItemNotFoundError
from .models import (
    ArchiveJobView,
    ArchiveStatusResponse,
    ItemDetail,
    ItemListResponse,
    ItemSummary,
)


def _summary_fields(item: TrackedItem) -> dict:
    return {
        "id": item.id,
        "source_path": item.source_path,
        "watched_folder": item.watched_folder,
        "status": item.status,
        "checksum_pending": item.checksum_pending,
        "last_checksum_stable_since": item.last_checksum_stable_since,
        "file_count": item.file_count,
        "total_size": item.total_size,
        "created_at": item.created_at,
        "updated_at": item.updated_at,
    }


def get_item_summaries(
    catalog: ItemCatalog, status: Optional[ItemStatus] = None
) -> ItemListResponse:
    """List items, newest first."""
    items = catalog.list_items(status=status)
    items.reverse()
    summaries = [ItemSummary(**_summary_fields(item)) for item in items]
    return ItemListResponse(items=summaries, total_count=len(summaries))


def get_item_detail(catalog: ItemCatalog, item_id: str) -> ItemDetail:
    """
    Raises:
        ItemNotFoundError: If the item does not exist
    """
    item = catalog.get(item_id)
    if item is None:
        raise ItemNotFoundError(item_id)

    return ItemDetail(
        **_summary_fields(item),
        last_checksum=item.last_checksum,
        checksum_computed_at=item.checksum_computed_at,
        files=dict(item.files),
    )


def _job_view(job: ArchiveJob) -> ArchiveJobView:
    return ArchiveJobView(**job.model_dump())


def get_archive_status(archive_engine: ArchiveEngine) -> ArchiveStatusResponse:
    return ArchiveStatusResponse(
        in_flight=[_job_view(job) for job in archive_engine.in_flight()],
        recent=[_job_view(job) for job in archive_engine.recent_jobs()],
        max_workers=archive_engine.max_workers,
    )
