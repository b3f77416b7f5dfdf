"""API dependency injection."""

from typing import Annotated

from fastapi import Depends, Query

from opstracker.core.config import Settings, get_settings
from opstracker.engine.tracker import UsageTracker
from opstracker.notification.notifier import build_notifier
from opstracker.schemas.common import PaginationParams
from opstracker.storage.backends import JsonStore, MemoryJsonStore, RedisJsonStore
from opstracker.storage.log_store import EventLogStore

# Shared tracker; its lock must outlive individual requests
_tracker: UsageTracker | None = None


def init_tracker(settings: Settings | None = None) -> UsageTracker:
    """Build the process-wide tracker from settings."""
    global _tracker
    settings = settings or get_settings()
    backend: JsonStore
    if settings.storage_backend == "memory":
        backend = MemoryJsonStore()
    else:
        backend = RedisJsonStore()
    store = EventLogStore(backend, key_prefix=settings.storage_key_prefix)
    _tracker = UsageTracker(store, notifier=build_notifier(settings))
    return _tracker


async def close_tracker() -> None:
    """Release notifier resources and drop the shared tracker."""
    global _tracker
    if _tracker is not None and _tracker.notifier is not None:
        await _tracker.notifier.close()
    _tracker = None


def get_tracker() -> UsageTracker:
    """Get the shared tracker.

    Raises:
        RuntimeError: If the tracker was not initialized
    """
    if _tracker is None:
        raise RuntimeError("Tracker not initialized. Call init_tracker() first.")
    return _tracker


TrackerDep = Annotated[UsageTracker, Depends(get_tracker)]


def get_pagination(
    page: int = Query(default=1, ge=1, description="Page number"),
    page_size: int = Query(default=20, ge=1, le=100, description="Items per page"),
) -> PaginationParams:
    """Get pagination parameters from query."""
    return PaginationParams(page=page, page_size=page_size)


PaginationDep = Annotated[PaginationParams, Depends(get_pagination)]
