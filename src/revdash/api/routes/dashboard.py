"""
Dashboard endpoints - read model and live/paused control
"""

from fastapi import APIRouter, Depends

from revdash.api.dependencies import get_service_container
from revdash.api.schemas.dashboard import (
    DashboardResponse,
    LiveRequest,
    LiveStateResponse,
    TransactionListResponse,
    TransactionResponse,
)
from revdash.services.service_container import ServiceContainer
from revdash.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


def _state_response(services: ServiceContainer) -> LiveStateResponse:
    controller = services.controller
    return LiveStateResponse(
        state=controller.snapshot().state.name,
        live=controller.is_live,
    )


@router.get("", response_model=DashboardResponse, summary="Current dashboard snapshot")
async def get_dashboard(services: ServiceContainer = Depends(get_service_container)) -> DashboardResponse:
    return DashboardResponse.from_snapshot(services.controller.snapshot())


@router.get("/transactions", response_model=TransactionListResponse, summary="Recent transactions, newest first")
async def get_transactions(services: ServiceContainer = Depends(get_service_container)) -> TransactionListResponse:
    transactions = services.controller.feed.to_list()
    return TransactionListResponse(
        count=len(transactions),
        transactions=[TransactionResponse.from_transaction(tx) for tx in transactions],
    )


@router.post("/live", response_model=LiveStateResponse, summary="Set live or paused")
async def set_live(
    request: LiveRequest,
    services: ServiceContainer = Depends(get_service_container),
) -> LiveStateResponse:
    """
    Pausing cancels the revenue tick and transaction schedule immediately.
    Resuming starts a fresh tick cadence and a fresh burst; ticks missed
    while paused are never replayed.
    """
    services.controller.set_live(request.live)
    log.info("Live state set via API", live=request.live)
    return _state_response(services)


@router.post("/toggle", response_model=LiveStateResponse, summary="Flip live/paused")
async def toggle_live(services: ServiceContainer = Depends(get_service_container)) -> LiveStateResponse:
    state = services.controller.toggle()
    log.info("Live state toggled via API", state=state.name)
    return _state_response(services)
