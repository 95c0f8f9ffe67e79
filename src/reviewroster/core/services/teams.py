"""Team management."""
import logging
from typing import Sequence

from ..errors import ErrorCode, ReviewRosterError
from ..models import Team, User
from ..schemas.team import TeamMember
from ..storage.exceptions import DuplicateRecordError
from ..storage.repositories import DirectoryRepository
from .base import BaseService, require

logger = logging.getLogger(__name__)


class TeamService(BaseService):
    """Creates teams with their members and looks them up."""

    def __init__(self, directory: DirectoryRepository, **store_options):
        super().__init__(**store_options)
        self.directory = directory

    async def create_team(self, team_name: str, members: Sequence[TeamMember]) -> Team:
        """Create a team and upsert its members.

        Existing users listed as members are moved into the new team and
        take the given username and active flag.

        Raises:
            ReviewRosterError: TEAM_EXISTS, INVALID_INPUT, INTERNAL_ERROR
        """
        require(team_name=team_name)
        for member in members:
            require(user_id=member.user_id, username=member.username)

        users = [
            User(
                user_id=member.user_id,
                username=member.username,
                team_name=team_name,
                is_active=member.is_active,
            )
            for member in members
        ]
        try:
            return await self._call_store(
                "create_team", self.directory.create_team, team_name, users
            )
        except DuplicateRecordError:
            raise ReviewRosterError(ErrorCode.TEAM_EXISTS)

    async def get_team(self, team_name: str) -> Team:
        """Get a team with its members or fail with NOT_FOUND."""
        require(team_name=team_name)
        team = await self._call_store("get_team", self.directory.get_team, team_name)
        if team is None:
            raise ReviewRosterError(ErrorCode.NOT_FOUND, "team not found")
        return team
