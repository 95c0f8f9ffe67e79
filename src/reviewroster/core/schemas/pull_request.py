"""Pull request schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PullRequestCreate(BaseModel):
    """Schema for creating a pull request."""
    pull_request_id: str = Field(..., max_length=255, description="Caller-supplied unique id")
    pull_request_name: str = Field(..., max_length=512, description="Title of the pull request")
    author_id: str = Field(..., max_length=255, description="Id of the authoring user")


class PullRequestMerge(BaseModel):
    """Schema for merging a pull request."""
    pull_request_id: str = Field(..., description="Pull request to merge")


class ReviewerReassign(BaseModel):
    """Schema for replacing a reviewer."""
    pull_request_id: str = Field(..., description="Pull request being reviewed")
    old_user_id: str = Field(..., description="Reviewer to replace")


class PullRequestResponse(BaseModel):
    """Schema for a pull request with its reviewers."""
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: str
    assigned_reviewers: list[str]
    created_at: datetime
    merged_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PullRequestShort(BaseModel):
    """Schema for a pull request without reviewers or timestamps."""
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: str

    model_config = ConfigDict(from_attributes=True)


class PullRequestEnvelope(BaseModel):
    """Response wrapping a single pull request."""
    pr: PullRequestResponse


class ReassignResponse(BaseModel):
    """Response for a reviewer reassignment."""
    pr: PullRequestResponse
    replaced_by: str


class ReviewerPullRequests(BaseModel):
    """Pull requests a user is assigned to review."""
    user_id: str
    pull_requests: list[PullRequestShort]
