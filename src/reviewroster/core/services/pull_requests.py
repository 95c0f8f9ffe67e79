"""Pull request lifecycle: creation with auto-assignment, merge, reassignment."""
import logging
from typing import Optional

from ..errors import ErrorCode, ReviewRosterError
from ..models import PullRequest, PullRequestStatus
from ..routing.selector import ReviewerSelector, eligible_pool
from ..storage.base import DirectoryGateway, PullRequestStore
from ..storage.database import utcnow
from ..storage.exceptions import (
    DuplicateRecordError,
    InvalidReplacementError,
    PullRequestMergedError,
    RecordNotFoundError,
    ReviewerNotAssignedError,
    ReviewerSetChangedError,
)
from .base import BaseService, require

logger = logging.getLogger(__name__)


class PullRequestService(BaseService):
    """Orchestrates the pull request state machine.

    A pull request is created OPEN with up to ``reviewers_per_pr`` reviewers
    drawn from the author's team, may have reviewers swapped while OPEN, and
    moves to MERGED exactly once. All atomicity is delegated to the store.

    Args:
        pull_requests: Pull request store
        directory: User and team lookups
        selector: Reviewer selection engine (system randomness if omitted)
        reviewers_per_pr: Reviewers assigned on creation
        reassign_attempts: Fresh reads a reassignment may make when the
            reviewer set changes concurrently
    """

    def __init__(
        self,
        pull_requests: PullRequestStore,
        directory: DirectoryGateway,
        selector: Optional[ReviewerSelector] = None,
        reviewers_per_pr: int = 2,
        reassign_attempts: int = 3,
        **store_options,
    ):
        super().__init__(**store_options)
        self.pull_requests = pull_requests
        self.directory = directory
        self.selector = selector or ReviewerSelector()
        self.reviewers_per_pr = reviewers_per_pr
        self.reassign_attempts = max(1, reassign_attempts)

    async def get_pull_request(self, pull_request_id: str) -> PullRequest:
        """Get a pull request or fail with NOT_FOUND."""
        require(pull_request_id=pull_request_id)
        pull_request = await self._call_store(
            "get_pull_request", self.pull_requests.get_pull_request, pull_request_id
        )
        if pull_request is None:
            raise ReviewRosterError(ErrorCode.NOT_FOUND, "pull request not found")
        return pull_request

    async def create_pull_request(
        self, pull_request_id: str, pull_request_name: str, author_id: str
    ) -> PullRequest:
        """Create an OPEN pull request and assign reviewers from the author's team.

        Raises:
            ReviewRosterError: PR_EXISTS, NOT_FOUND (author or team), INVALID_INPUT,
                INTERNAL_ERROR
        """
        require(
            pull_request_id=pull_request_id,
            pull_request_name=pull_request_name,
            author_id=author_id,
        )

        existing = await self._call_store(
            "get_pull_request", self.pull_requests.get_pull_request, pull_request_id
        )
        if existing is not None:
            raise ReviewRosterError(ErrorCode.PR_EXISTS)

        author = await self._call_store("get_user", self.directory.get_user, author_id)
        if author is None:
            raise ReviewRosterError(ErrorCode.NOT_FOUND, "author not found")

        try:
            members = await self._call_store(
                "get_active_team_members",
                self.directory.get_active_team_members,
                author.team_name,
            )
        except RecordNotFoundError:
            raise ReviewRosterError(ErrorCode.NOT_FOUND, "author's team not found")

        pool = eligible_pool(members, excluded={author.user_id})
        reviewer_ids = self.selector.select(pool, self.reviewers_per_pr)

        pull_request = PullRequest(
            pull_request_id=pull_request_id,
            pull_request_name=pull_request_name,
            author_id=author_id,
            status=PullRequestStatus.OPEN.value,
            merged_at=None,
        )
        try:
            return await self._call_store(
                "create_pull_request",
                self.pull_requests.create_pull_request,
                pull_request,
                reviewer_ids,
            )
        except DuplicateRecordError:
            raise ReviewRosterError(ErrorCode.PR_EXISTS)

    async def merge_pull_request(self, pull_request_id: str) -> PullRequest:
        """Mark a pull request MERGED. Merging a merged pull request is a no-op.

        Raises:
            ReviewRosterError: NOT_FOUND, INVALID_INPUT, INTERNAL_ERROR
        """
        pull_request = await self.get_pull_request(pull_request_id)
        if pull_request.is_merged:
            return pull_request

        try:
            return await self._call_store(
                "mark_merged", self.pull_requests.mark_merged, pull_request_id, utcnow()
            )
        except RecordNotFoundError:
            raise ReviewRosterError(ErrorCode.NOT_FOUND, "pull request not found")

    async def reassign_reviewer(
        self, pull_request_id: str, old_reviewer_id: str
    ) -> tuple[PullRequest, str]:
        """Replace one reviewer with a random eligible member of that reviewer's team.

        The candidate is chosen against the reviewer set read at the start of
        the attempt, and the store only applies the swap if that set is still
        current under its row lock. A concurrent change to the reviewer set
        makes the attempt start over from a fresh read.

        Returns:
            The updated pull request and the id of the new reviewer

        Raises:
            ReviewRosterError: INVALID_INPUT, NOT_FOUND, PR_MERGED, NOT_ASSIGNED,
                NO_CANDIDATE, INTERNAL_ERROR
        """
        require(pull_request_id=pull_request_id, old_user_id=old_reviewer_id)

        for attempt in range(1, self.reassign_attempts + 1):
            try:
                return await self._reassign_once(pull_request_id, old_reviewer_id)
            except ReviewerSetChangedError:
                logger.info(
                    "Reviewers of %s changed during reassignment (attempt %d/%d)",
                    pull_request_id,
                    attempt,
                    self.reassign_attempts,
                )

        logger.error(
            "Giving up reassigning %s on %s after %d concurrent changes",
            old_reviewer_id,
            pull_request_id,
            self.reassign_attempts,
        )
        raise ReviewRosterError(
            ErrorCode.INTERNAL_ERROR,
            "reviewer set kept changing, retry the request",
            transient=True,
        )

    async def _reassign_once(
        self, pull_request_id: str, old_reviewer_id: str
    ) -> tuple[PullRequest, str]:
        pull_request = await self.get_pull_request(pull_request_id)
        if pull_request.is_merged:
            raise ReviewRosterError(ErrorCode.PR_MERGED)

        assigned = list(pull_request.assigned_reviewers)
        if old_reviewer_id not in assigned:
            raise ReviewRosterError(ErrorCode.NOT_ASSIGNED)

        old_reviewer = await self._call_store("get_user", self.directory.get_user, old_reviewer_id)
        if old_reviewer is None:
            raise ReviewRosterError(ErrorCode.NOT_FOUND, "reviewer not found")

        try:
            members = await self._call_store(
                "get_active_team_members",
                self.directory.get_active_team_members,
                old_reviewer.team_name,
            )
        except RecordNotFoundError:
            raise ReviewRosterError(ErrorCode.NO_CANDIDATE)

        excluded = {old_reviewer_id, pull_request.author_id, *assigned}
        new_reviewer_id = self.selector.pick_one(eligible_pool(members, excluded))
        if new_reviewer_id is None:
            raise ReviewRosterError(ErrorCode.NO_CANDIDATE)

        try:
            updated = await self._call_store(
                "replace_reviewer",
                self.pull_requests.replace_reviewer,
                pull_request_id,
                old_reviewer_id,
                new_reviewer_id,
                assigned,
            )
        except RecordNotFoundError:
            raise ReviewRosterError(ErrorCode.NOT_FOUND, "pull request not found")
        except PullRequestMergedError:
            raise ReviewRosterError(ErrorCode.PR_MERGED)
        except ReviewerNotAssignedError:
            raise ReviewRosterError(ErrorCode.NOT_ASSIGNED)
        except InvalidReplacementError:
            logger.exception("Selected %s to replace itself on %s", new_reviewer_id, pull_request_id)
            raise ReviewRosterError(ErrorCode.INTERNAL_ERROR)

        return updated, new_reviewer_id
