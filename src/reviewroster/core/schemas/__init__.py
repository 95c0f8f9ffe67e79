"""Pydantic schemas for API validation and serialization."""
from .errors import ErrorDetail, ErrorResponse
from .pull_request import (
    PullRequestCreate,
    PullRequestEnvelope,
    PullRequestMerge,
    PullRequestResponse,
    PullRequestShort,
    ReassignResponse,
    ReviewerPullRequests,
    ReviewerReassign,
)
from .stats import ReviewStats, UserReviewStats
from .team import (
    TeamCreate,
    TeamEnvelope,
    TeamMember,
    TeamResponse,
    UserActiveUpdate,
    UserEnvelope,
    UserResponse,
)

__all__ = [
    # Pull request schemas
    "PullRequestCreate",
    "PullRequestMerge",
    "ReviewerReassign",
    "PullRequestResponse",
    "PullRequestShort",
    "PullRequestEnvelope",
    "ReassignResponse",
    "ReviewerPullRequests",
    # Team and user schemas
    "TeamMember",
    "TeamCreate",
    "TeamResponse",
    "TeamEnvelope",
    "UserActiveUpdate",
    "UserResponse",
    "UserEnvelope",
    # Statistics schemas
    "ReviewStats",
    "UserReviewStats",
    # Error schemas
    "ErrorDetail",
    "ErrorResponse",
]
