"""Usage snapshot API routes."""

from fastapi import APIRouter

from opstracker.api.deps import TrackerDep
from opstracker.models.snapshot import StatsSnapshot
from opstracker.schemas.common import APIResponse

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", response_model=APIResponse[StatsSnapshot])
async def get_stats(tracker: TrackerDep) -> APIResponse[StatsSnapshot]:
    """Get the current usage and health snapshot.

    Dashboards poll this endpoint; it is answered even when the backing
    store is unreachable.
    """
    snapshot = await tracker.compute_snapshot()
    return APIResponse(data=snapshot)
