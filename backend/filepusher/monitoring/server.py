"""
Monitoring server endpoints.

Read-only HTTP API for item and archive visibility.
Intended for trusted LAN access. Observation only, no control operations.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Request

from ..items.models import ItemStatus
from .errors import ItemNotFoundError
from .models import (
    ArchiveStatusResponse,
    HealthResponse,
    ItemDetail,
    ItemListResponse,
)
from .queries import get_archive_status, get_item_detail, get_item_summaries


router = APIRouter(prefix="/monitor", tags=["monitoring"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """
    Health check endpoint.

    Returns:
        Status indicator and whether the scan scheduler is running
    """
    scheduler = getattr(request.app.state, "scheduler", None)
    return HealthResponse(
        status="ok",
        scheduler_running=bool(scheduler and scheduler.is_running),
    )


@router.get("/items", response_model=ItemListResponse)
async def list_items(request: Request, status: Optional[ItemStatus] = None):
    """
    List tracked items, newest first.

    Args:
        status: Optional status filter (watching, ready_to_send, sent, error)
    """
    catalog = request.app.state.catalog
    return get_item_summaries(catalog, status)


@router.get("/items/{item_id}", response_model=ItemDetail)
async def get_item(item_id: str, request: Request):
    """
    Retrieve one tracked item with its checksum and file snapshot.

    Raises:
        404: If the item ID does not exist
    """
    catalog = request.app.state.catalog

    try:
        return get_item_detail(catalog, item_id)
    except ItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/archives", response_model=ArchiveStatusResponse)
async def archive_status(request: Request):
    """
    In-flight and recently finished archive jobs.
    """
    archive_engine = request.app.state.archive_engine
    return get_archive_status(archive_engine)
