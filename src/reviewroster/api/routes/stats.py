"""Statistics endpoints"""
from fastapi import APIRouter, Depends

from ...core.schemas.stats import ReviewStats
from ...core.services import StatsService
from ..dependencies import get_stats_service

router = APIRouter()


@router.get("/stats", response_model=ReviewStats)
async def get_statistics(service: StatsService = Depends(get_stats_service)):
    """Total pull requests and review assignments per user."""
    return await service.get_stats()
