"""User activity and review listings."""
from ..errors import ErrorCode, ReviewRosterError
from ..models import PullRequest, User
from ..storage.base import PullRequestStore
from ..storage.repositories import DirectoryRepository
from .base import BaseService, require


class UserService(BaseService):
    """Operations on individual users."""

    def __init__(
        self,
        directory: DirectoryRepository,
        pull_requests: PullRequestStore,
        **store_options,
    ):
        super().__init__(**store_options)
        self.directory = directory
        self.pull_requests = pull_requests

    async def set_is_active(self, user_id: str, is_active: bool) -> User:
        """Toggle whether a user is eligible for new review assignments.

        Existing assignments are left untouched.
        """
        require(user_id=user_id)
        user = await self._call_store(
            "set_user_active", self.directory.set_user_active, user_id, is_active
        )
        if user is None:
            raise ReviewRosterError(ErrorCode.NOT_FOUND, "user not found")
        return user

    async def get_reviews(self, user_id: str) -> list[PullRequest]:
        """List pull requests the user is assigned to review."""
        require(user_id=user_id)
        user = await self._call_store("get_user", self.directory.get_user, user_id)
        if user is None:
            raise ReviewRosterError(ErrorCode.NOT_FOUND, "user not found")
        return await self._call_store(
            "list_by_reviewer", self.pull_requests.list_by_reviewer, user_id
        )
