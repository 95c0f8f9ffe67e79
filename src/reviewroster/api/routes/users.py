"""User endpoints"""
from fastapi import APIRouter, Depends, Query

from ...core.schemas.pull_request import PullRequestShort, ReviewerPullRequests
from ...core.schemas.team import UserActiveUpdate, UserEnvelope, UserResponse
from ...core.services import UserService
from ..dependencies import get_user_service

router = APIRouter(prefix="/users")


@router.post("/setIsActive", response_model=UserEnvelope)
async def set_is_active(
    data: UserActiveUpdate,
    service: UserService = Depends(get_user_service),
):
    """Activate or deactivate a user for future review assignments."""
    user = await service.set_is_active(data.user_id, data.is_active)
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.get("/getReview", response_model=ReviewerPullRequests)
async def get_reviews(
    user_id: str = Query(..., description="Reviewer id"),
    service: UserService = Depends(get_user_service),
):
    """List pull requests where the user is an assigned reviewer."""
    pull_requests = await service.get_reviews(user_id)
    return ReviewerPullRequests(
        user_id=user_id,
        pull_requests=[PullRequestShort.model_validate(pr) for pr in pull_requests],
    )
