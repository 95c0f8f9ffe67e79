"""Store contracts consumed by the pull request lifecycle service."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Collection, Optional, Sequence

from ..models import PullRequest, User


class PullRequestStore(ABC):
    """Durable storage of pull requests and their reviewer sets.

    Every write method is a single transaction: either all of its rows are
    written or none are.
    """

    @abstractmethod
    async def get_pull_request(self, pull_request_id: str) -> Optional[PullRequest]:
        """
        Get a pull request with its reviewers.

        Returns:
            PullRequest or None if it does not exist
        """
        pass

    @abstractmethod
    async def create_pull_request(
        self, pull_request: PullRequest, reviewer_ids: Sequence[str]
    ) -> PullRequest:
        """
        Insert a pull request together with its reviewer associations.

        Raises:
            DuplicateRecordError: If the pull request id is already taken
        """
        pass

    @abstractmethod
    async def mark_merged(self, pull_request_id: str, merged_at: datetime) -> PullRequest:
        """
        Transition an OPEN pull request to MERGED.

        A pull request that is already MERGED is returned unchanged, so
        concurrent merges converge on the first timestamp written.

        Raises:
            RecordNotFoundError: If the pull request does not exist
        """
        pass

    @abstractmethod
    async def replace_reviewer(
        self,
        pull_request_id: str,
        old_reviewer_id: str,
        new_reviewer_id: str,
        expected_reviewers: Optional[Collection[str]] = None,
    ) -> PullRequest:
        """
        Swap one reviewer for another under a lock on the pull request row.

        Args:
            pull_request_id: Pull request to update
            old_reviewer_id: Reviewer being vacated
            new_reviewer_id: Replacement reviewer
            expected_reviewers: Reviewer set the replacement was chosen against;
                when given, the write only proceeds if the locked row still has it

        Raises:
            RecordNotFoundError: If the pull request does not exist
            PullRequestMergedError: If the pull request is no longer OPEN
            ReviewerNotAssignedError: If the old reviewer is not assigned
            ReviewerSetChangedError: If the reviewer set differs from expected_reviewers
            InvalidReplacementError: If old and new reviewer are the same
        """
        pass

    @abstractmethod
    async def list_by_reviewer(self, reviewer_id: str) -> list[PullRequest]:
        """
        List pull requests the user is assigned to review.
        """
        pass


class DirectoryGateway(ABC):
    """Read access to users and team membership."""

    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[User]:
        """
        Get a user by id.

        Returns:
            User or None if unknown
        """
        pass

    @abstractmethod
    async def get_active_team_members(self, team_name: str) -> list[User]:
        """
        Get the active members of a team.

        Raises:
            RecordNotFoundError: If the team does not exist
        """
        pass
