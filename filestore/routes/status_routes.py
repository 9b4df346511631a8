"""Store liveness and statistics routes."""

from fastapi import APIRouter, Depends

from filestore.dependencies import get_status_service
from filestore.schemas.common import StatsResponse, StatusResponse
from filestore.services.status_service import StatusService

router = APIRouter(tags=["Status"])


@router.get("/status", response_model=StatusResponse)
def get_status(status_service: StatusService = Depends(get_status_service)):
    return status_service.status()


@router.get("/stats", response_model=StatsResponse)
def get_stats(status_service: StatusService = Depends(get_status_service)):
    return status_service.stats()
