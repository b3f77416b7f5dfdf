"""Admin settings API routes."""

from fastapi import APIRouter

from opstracker.api.deps import TrackerDep
from opstracker.models.admin import AdminSettings
from opstracker.schemas.common import APIResponse

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=APIResponse[AdminSettings])
async def get_admin_settings(tracker: TrackerDep) -> APIResponse[AdminSettings]:
    """Get alerting settings."""
    return APIResponse(data=await tracker.get_settings())


@router.put("", response_model=APIResponse[AdminSettings])
async def replace_admin_settings(
    data: AdminSettings,
    tracker: TrackerDep,
) -> APIResponse[AdminSettings]:
    """Replace alerting settings. Only the shape is validated."""
    await tracker.put_settings(data)
    return APIResponse(data=data)
