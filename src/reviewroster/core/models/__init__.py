"""Data models for teams, users, pull requests and reviewer assignments."""
# Import all models to ensure relationships work correctly
from .team import Team
from .user import User
from .pull_request import PullRequest, PullRequestStatus
from .assignment import PullRequestReviewer

__all__ = [
    # Directory models
    "Team",
    "User",
    # Pull request models
    "PullRequest",
    "PullRequestStatus",
    # Assignment models
    "PullRequestReviewer",
]
