"""Status endpoint for the RebuildDispatcher."""

from fastapi import APIRouter

from yarnsite.api.dependencies import DispatcherDep
from yarnsite.api.models import (
    APIResponse,
    DispatcherStatusResponse,
    dispatcher_status_to_response,
)

router = APIRouter(tags=["status"])


@router.get("/status", response_model=APIResponse[DispatcherStatusResponse])
def get_status(dispatcher: DispatcherDep) -> APIResponse[DispatcherStatusResponse]:
    """Get dispatcher state, watched roots and rebuild counters."""
    return APIResponse(data=dispatcher_status_to_response(dispatcher.status()))
