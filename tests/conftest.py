"""Shared fixtures: in-memory database, repositories and a seeded team."""
import random

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from reviewroster.core.config.settings import init_config
from reviewroster.core.models import Team, User
from reviewroster.core.routing.selector import ReviewerSelector
from reviewroster.core.services import PullRequestService
from reviewroster.core.storage.database import Database, init_db
from reviewroster.core.storage.repositories import DirectoryRepository, PullRequestRepository


async def add_team(session: AsyncSession, team_name: str, members: dict[str, bool]) -> None:
    """Insert a team with members given as ``{user_id: is_active}``."""
    session.add(Team(team_name=team_name))
    await session.flush()
    for user_id, is_active in members.items():
        session.add(
            User(
                user_id=user_id,
                username=f"user-{user_id}",
                team_name=team_name,
                is_active=is_active,
            )
        )
    await session.commit()


@pytest.fixture
async def db():
    """Create test database."""
    config = init_config()
    config.db_path = ":memory:"
    db = init_db(config.get_database_url())
    await db.create_tables()
    yield db
    await db.close()


@pytest.fixture
async def session(db: Database):
    """Create test session."""
    async with db.session() as session:
        yield session


@pytest.fixture
def pr_repo(session: AsyncSession):
    """Create pull request repository."""
    return PullRequestRepository(session)


@pytest.fixture
def directory(session: AsyncSession):
    """Create directory repository."""
    return DirectoryRepository(session)


@pytest.fixture
def service(pr_repo: PullRequestRepository, directory: DirectoryRepository):
    """Pull request service with a seeded selector."""
    return PullRequestService(
        pr_repo,
        directory,
        selector=ReviewerSelector(random.Random(1234)),
        store_retry_backoff=0.0,
    )


@pytest.fixture
async def team_t(session: AsyncSession):
    """Team T: author A plus active members B, C, D."""
    await add_team(session, "T", {"A": True, "B": True, "C": True, "D": True})


@pytest.fixture
def make_team(session: AsyncSession):
    """Factory inserting extra teams into the test database."""

    async def _make(team_name: str, members: dict[str, bool]) -> None:
        await add_team(session, team_name, members)

    return _make
