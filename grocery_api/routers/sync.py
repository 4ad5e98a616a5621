"""Batch synchronization endpoint for offline-first clients."""

from fastapi import APIRouter

from grocery_api.dependencies import CurrentUser, SessionFactory
from grocery_api.schemas.sync import SyncRequest, SyncResponse
from grocery_api.sync.orchestrator import SyncOrchestrator

router = APIRouter(prefix="/api/sync", tags=["sync"])


@router.post("", response_model=SyncResponse)
async def synchronize(
    request: SyncRequest,
    current_user: CurrentUser,
    session_factory: SessionFactory,
) -> SyncResponse:
    """Reconcile client changes and return the merged server delta.

    Partial failures are not reported: the response simply carries fewer
    entities and the next sync retries them.
    """
    return await SyncOrchestrator(session_factory).synchronize(request, current_user)
