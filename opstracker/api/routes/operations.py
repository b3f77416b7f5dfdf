"""Operation reporting and log API routes."""

from fastapi import APIRouter

from opstracker.api.deps import PaginationDep, TrackerDep
from opstracker.models.operation import OperationInput, OperationRecord
from opstracker.schemas.common import APIResponse, PaginatedResponse

router = APIRouter(tags=["operations"])


@router.post("/operations", response_model=APIResponse[OperationRecord])
async def record_operation(
    data: OperationInput,
    tracker: TrackerDep,
) -> APIResponse[OperationRecord]:
    """Record a completed operation reported by a converter or the model proxy."""
    record = await tracker.record_operation(data)
    return APIResponse(data=record)


@router.get("/logs", response_model=PaginatedResponse[OperationRecord])
async def list_logs(
    tracker: TrackerDep,
    pagination: PaginationDep,
) -> PaginatedResponse[OperationRecord]:
    """List retained records, most recent first."""
    records = await tracker.list_logs()
    return PaginatedResponse[OperationRecord].of(records, pagination)


@router.delete("/logs", response_model=APIResponse)
async def clear_logs(tracker: TrackerDep) -> APIResponse:
    """Delete every retained record. Admin settings are kept."""
    await tracker.clear_logs()
    return APIResponse(message="Logs cleared")
