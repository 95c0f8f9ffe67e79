"""Application services."""
from .base import BaseService, is_transient
from .pull_requests import PullRequestService
from .stats import StatsService
from .teams import TeamService
from .users import UserService

__all__ = [
    "BaseService",
    "is_transient",
    "PullRequestService",
    "TeamService",
    "UserService",
    "StatsService",
]
