"""Pull request endpoints"""
import logging

from fastapi import APIRouter, Depends, Query

from ...core.schemas.pull_request import (
    PullRequestCreate,
    PullRequestEnvelope,
    PullRequestMerge,
    PullRequestResponse,
    ReassignResponse,
    ReviewerReassign,
)
from ...core.services import PullRequestService
from ..dependencies import get_pull_request_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pullRequest")


@router.post("/create", response_model=PullRequestEnvelope, status_code=201)
async def create_pull_request(
    data: PullRequestCreate,
    service: PullRequestService = Depends(get_pull_request_service),
):
    """Create a pull request and assign up to two reviewers from the author's team."""
    pull_request = await service.create_pull_request(
        data.pull_request_id, data.pull_request_name, data.author_id
    )
    return PullRequestEnvelope(pr=PullRequestResponse.model_validate(pull_request))


@router.post("/merge", response_model=PullRequestEnvelope)
async def merge_pull_request(
    data: PullRequestMerge,
    service: PullRequestService = Depends(get_pull_request_service),
):
    """Mark a pull request as MERGED. Repeating the call returns the merged PR."""
    pull_request = await service.merge_pull_request(data.pull_request_id)
    return PullRequestEnvelope(pr=PullRequestResponse.model_validate(pull_request))


@router.post("/reassign", response_model=ReassignResponse)
async def reassign_reviewer(
    data: ReviewerReassign,
    service: PullRequestService = Depends(get_pull_request_service),
):
    """Replace a reviewer with another active member of the reviewer's team."""
    pull_request, new_reviewer_id = await service.reassign_reviewer(
        data.pull_request_id, data.old_user_id
    )
    logger.debug(
        "Reviewer %s replaced by %s on %s",
        data.old_user_id,
        new_reviewer_id,
        data.pull_request_id,
    )
    return ReassignResponse(
        pr=PullRequestResponse.model_validate(pull_request),
        replaced_by=new_reviewer_id,
    )


@router.get("/get", response_model=PullRequestEnvelope)
async def get_pull_request(
    pull_request_id: str = Query(..., description="Pull request id"),
    service: PullRequestService = Depends(get_pull_request_service),
):
    """Get a pull request with its reviewers."""
    pull_request = await service.get_pull_request(pull_request_id)
    return PullRequestEnvelope(pr=PullRequestResponse.model_validate(pull_request))
