"""API route modules."""
from . import pull_requests, teams, users, stats

__all__ = [
    "pull_requests",
    "teams",
    "users",
    "stats",
]
