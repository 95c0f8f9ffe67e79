"""Team endpoints"""
from fastapi import APIRouter, Depends, Query

from ...core.schemas.team import TeamCreate, TeamEnvelope, TeamResponse
from ...core.services import TeamService
from ..dependencies import get_team_service

router = APIRouter(prefix="/team")


@router.post("/add", response_model=TeamEnvelope, status_code=201)
async def add_team(
    data: TeamCreate,
    service: TeamService = Depends(get_team_service),
):
    """Create a team and create or update its members."""
    team = await service.create_team(data.team_name, data.members)
    return TeamEnvelope(team=TeamResponse.model_validate(team))


@router.get("/get", response_model=TeamResponse)
async def get_team(
    team_name: str = Query(..., description="Team name"),
    service: TeamService = Depends(get_team_service),
):
    """Get a team with its members."""
    team = await service.get_team(team_name)
    return TeamResponse.model_validate(team)
