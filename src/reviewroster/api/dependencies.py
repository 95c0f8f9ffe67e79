"""FastAPI dependencies wiring sessions into repositories and services."""
from typing import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config.settings import get_config
from ..core.routing.selector import get_selector
from ..core.services import PullRequestService, StatsService, TeamService, UserService
from ..core.storage.database import get_db
from ..core.storage.repositories import (
    DirectoryRepository,
    PullRequestRepository,
    StatsRepository,
)


async def get_session() -> AsyncIterator[AsyncSession]:
    """Get database session dependency."""
    db = get_db()
    async with db.session() as session:
        yield session


def _store_options() -> dict:
    config = get_config()
    return {
        "store_timeout": config.store_timeout,
        "store_retry_attempts": config.store_retry_attempts,
        "store_retry_backoff": config.store_retry_backoff,
    }


def get_pull_request_service(
    session: AsyncSession = Depends(get_session),
) -> PullRequestService:
    return PullRequestService(
        PullRequestRepository(session),
        DirectoryRepository(session),
        selector=get_selector(),
        reviewers_per_pr=get_config().reviewers_per_pr,
        **_store_options(),
    )


def get_team_service(session: AsyncSession = Depends(get_session)) -> TeamService:
    return TeamService(DirectoryRepository(session), **_store_options())


def get_user_service(session: AsyncSession = Depends(get_session)) -> UserService:
    return UserService(
        DirectoryRepository(session),
        PullRequestRepository(session),
        **_store_options(),
    )


def get_stats_service(session: AsyncSession = Depends(get_session)) -> StatsService:
    return StatsService(StatsRepository(session), **_store_options())
