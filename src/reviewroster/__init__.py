"""ReviewRoster - pull request tracking with team-based reviewer assignment.

Creating a pull request assigns up to two reviewers drawn at random from the
author's team; reviewers can be swapped while the pull request is open, and
merging closes it.
"""
__version__ = "0.1.0"

from .core.config.settings import ReviewRosterConfig, get_config, init_config
from .core.errors import ErrorCode, ReviewRosterError
from .core.models import PullRequest, PullRequestReviewer, PullRequestStatus, Team, User
from .core.routing import ReviewerSelector, eligible_pool
from .core.schemas import (
    PullRequestCreate,
    PullRequestResponse,
    ReviewStats,
    TeamCreate,
    TeamResponse,
)
from .core.services import PullRequestService, StatsService, TeamService, UserService
from .core.storage.database import Database, get_db, init_db

from . import core

__all__ = [
    # Version
    "__version__",
    # Config
    "ReviewRosterConfig",
    "init_config",
    "get_config",
    # Database
    "Database",
    "init_db",
    "get_db",
    # Errors
    "ErrorCode",
    "ReviewRosterError",
    # Models
    "Team",
    "User",
    "PullRequest",
    "PullRequestReviewer",
    "PullRequestStatus",
    # Schemas
    "PullRequestCreate",
    "PullRequestResponse",
    "TeamCreate",
    "TeamResponse",
    "ReviewStats",
    # Selection
    "ReviewerSelector",
    "eligible_pool",
    # Services
    "PullRequestService",
    "TeamService",
    "UserService",
    "StatsService",
    # Core module
    "core",
]
