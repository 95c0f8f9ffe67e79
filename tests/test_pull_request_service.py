"""Tests for the pull request lifecycle service."""
import random

import pytest

from reviewroster.core.errors import ErrorCode, ReviewRosterError
from reviewroster.core.models import PullRequest, PullRequestStatus
from reviewroster.core.routing.selector import ReviewerSelector
from reviewroster.core.services import PullRequestService
from reviewroster.core.storage.repositories import DirectoryRepository, PullRequestRepository


async def _reviewers(pr_repo: PullRequestRepository, pull_request_id: str) -> list[str]:
    pull_request = await pr_repo.get_pull_request(pull_request_id)
    return pull_request.assigned_reviewers


@pytest.mark.asyncio
async def test_create_assigns_two_reviewers_from_author_team(service: PullRequestService, team_t):
    """Test that creation picks a 2-element subset of the author's teammates."""
    pull_request = await service.create_pull_request("pr-1", "Add feature", "A")

    assert pull_request.status == PullRequestStatus.OPEN.value
    assert pull_request.merged_at is None
    assert pull_request.created_at is not None
    assert len(pull_request.assigned_reviewers) == 2
    assert set(pull_request.assigned_reviewers) <= {"B", "C", "D"}
    assert len(set(pull_request.assigned_reviewers)) == 2


@pytest.mark.asyncio
async def test_create_never_assigns_author_or_duplicates(service: PullRequestService, team_t):
    """Test structural invariants over many creations."""
    for i in range(25):
        pull_request = await service.create_pull_request(f"pr-{i}", f"Change {i}", "B")
        reviewers = pull_request.assigned_reviewers
        assert "B" not in reviewers
        assert len(reviewers) == len(set(reviewers))
        assert len(reviewers) <= 2


@pytest.mark.asyncio
async def test_create_uses_whole_pool_when_small(service: PullRequestService, make_team):
    """Test that a pool of at most two eligible members is assigned entirely."""
    await make_team("small", {"A": True, "B": True, "C": False})

    pull_request = await service.create_pull_request("pr-1", "Fix bug", "A")

    assert pull_request.assigned_reviewers == ["B"]


@pytest.mark.asyncio
async def test_create_with_no_teammates_has_no_reviewers(service: PullRequestService, make_team):
    """Test that a lone author gets an OPEN pull request without reviewers."""
    await make_team("solo", {"A": True})

    pull_request = await service.create_pull_request("pr-1", "Fix bug", "A")

    assert pull_request.assigned_reviewers == []
    assert pull_request.status == PullRequestStatus.OPEN.value


@pytest.mark.asyncio
async def test_create_inactive_author_still_excluded(service: PullRequestService, make_team):
    """Test that only active teammates other than the author are eligible."""
    await make_team("T2", {"A": False, "B": True, "C": True})

    pull_request = await service.create_pull_request("pr-1", "Fix bug", "A")

    assert sorted(pull_request.assigned_reviewers) == ["B", "C"]


@pytest.mark.asyncio
async def test_create_duplicate_id_rejected(
    service: PullRequestService, pr_repo: PullRequestRepository, team_t
):
    """Test that an existing pull request id cannot be reused."""
    first = await service.create_pull_request("pr-1", "First", "A")
    original_reviewers = list(first.assigned_reviewers)

    with pytest.raises(ReviewRosterError) as exc_info:
        await service.create_pull_request("pr-1", "Second", "B")

    assert exc_info.value.code == ErrorCode.PR_EXISTS
    stored = await pr_repo.get_pull_request("pr-1")
    assert stored.pull_request_name == "First"
    assert stored.assigned_reviewers == original_reviewers


@pytest.mark.asyncio
async def test_create_unknown_author_not_found(service: PullRequestService, team_t):
    """Test that an unknown author fails with NOT_FOUND."""
    with pytest.raises(ReviewRosterError) as exc_info:
        await service.create_pull_request("pr-1", "Title", "ghost")

    assert exc_info.value.code == ErrorCode.NOT_FOUND


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "pull_request_id,name,author_id",
    [("", "Title", "A"), ("pr-1", "", "A"), ("pr-1", "Title", "  ")],
)
async def test_create_requires_fields(service: PullRequestService, team_t, pull_request_id, name, author_id):
    """Test that empty required fields fail with INVALID_INPUT."""
    with pytest.raises(ReviewRosterError) as exc_info:
        await service.create_pull_request(pull_request_id, name, author_id)

    assert exc_info.value.code == ErrorCode.INVALID_INPUT


@pytest.mark.asyncio
async def test_merge_sets_status_and_timestamp(service: PullRequestService, team_t):
    """Test merging an open pull request."""
    created = await service.create_pull_request("pr-1", "Title", "A")
    reviewers = list(created.assigned_reviewers)

    merged = await service.merge_pull_request("pr-1")

    assert merged.status == PullRequestStatus.MERGED.value
    assert merged.merged_at is not None
    assert merged.assigned_reviewers == reviewers


@pytest.mark.asyncio
async def test_merge_is_idempotent(service: PullRequestService, team_t):
    """Test that merging twice succeeds and keeps the first timestamp."""
    await service.create_pull_request("pr-1", "Title", "A")

    first = await service.merge_pull_request("pr-1")
    first_merged_at = first.merged_at
    second = await service.merge_pull_request("pr-1")

    assert second.status == PullRequestStatus.MERGED.value
    assert second.merged_at == first_merged_at


@pytest.mark.asyncio
async def test_merge_unknown_pull_request_not_found(service: PullRequestService, team_t):
    """Test that merging a nonexistent pull request fails with NOT_FOUND."""
    with pytest.raises(ReviewRosterError) as exc_info:
        await service.merge_pull_request("missing")

    assert exc_info.value.code == ErrorCode.NOT_FOUND


@pytest.mark.asyncio
async def test_reassign_replaces_reviewer(service: PullRequestService, make_team):
    """Test the post-conditions of a successful reassignment."""
    await make_team("big", {"A": True, "B": True, "C": True, "D": True, "E": True})
    created = await service.create_pull_request("pr-1", "Title", "A")
    before = list(created.assigned_reviewers)
    old = before[0]

    updated, new_reviewer = await service.reassign_reviewer("pr-1", old)
    after = updated.assigned_reviewers

    assert old not in after
    assert new_reviewer in after
    assert new_reviewer not in before
    assert new_reviewer != "A"
    assert len(after) == len(before)
    assert len(set(after)) == len(after)
    assert set(after) - set(before) == {new_reviewer}


@pytest.mark.asyncio
async def test_reassign_on_merged_pull_request_fails(
    service: PullRequestService, pr_repo: PullRequestRepository, team_t
):
    """Test that a merged pull request keeps its reviewers."""
    created = await service.create_pull_request("pr-1", "Title", "A")
    reviewers = list(created.assigned_reviewers)
    await service.merge_pull_request("pr-1")

    with pytest.raises(ReviewRosterError) as exc_info:
        await service.reassign_reviewer("pr-1", reviewers[0])

    assert exc_info.value.code == ErrorCode.PR_MERGED
    assert await _reviewers(pr_repo, "pr-1") == reviewers


@pytest.mark.asyncio
async def test_reassign_unassigned_reviewer_fails(service: PullRequestService, team_t):
    """Test NOT_ASSIGNED for users outside the reviewer set, known or not."""
    created = await service.create_pull_request("pr-1", "Title", "A")
    outsider = ({"B", "C", "D"} - set(created.assigned_reviewers)).pop()

    for reviewer_id in (outsider, "A", "ghost"):
        with pytest.raises(ReviewRosterError) as exc_info:
            await service.reassign_reviewer("pr-1", reviewer_id)
        assert exc_info.value.code == ErrorCode.NOT_ASSIGNED


@pytest.mark.asyncio
async def test_reassign_without_candidates_fails(
    service: PullRequestService, pr_repo: PullRequestRepository, make_team
):
    """Test NO_CANDIDATE when every active teammate is excluded."""
    await make_team("T", {"A": True, "B": True, "C": True})
    created = await service.create_pull_request("pr-1", "Title", "A")
    assert sorted(created.assigned_reviewers) == ["B", "C"]

    with pytest.raises(ReviewRosterError) as exc_info:
        await service.reassign_reviewer("pr-1", "B")

    assert exc_info.value.code == ErrorCode.NO_CANDIDATE
    assert sorted(await _reviewers(pr_repo, "pr-1")) == ["B", "C"]


@pytest.mark.asyncio
async def test_reassign_skips_inactive_members(
    service: PullRequestService, directory: DirectoryRepository, make_team
):
    """Test that deactivated teammates are never chosen as replacements."""
    await make_team("T", {"A": True, "B": True, "C": True, "D": True})
    created = await service.create_pull_request("pr-1", "Title", "A")
    free = ({"B", "C", "D"} - set(created.assigned_reviewers)).pop()
    await directory.set_user_active(free, False)

    with pytest.raises(ReviewRosterError) as exc_info:
        await service.reassign_reviewer("pr-1", created.assigned_reviewers[0])

    assert exc_info.value.code == ErrorCode.NO_CANDIDATE


@pytest.mark.asyncio
async def test_reassign_draws_from_reviewer_team(
    service: PullRequestService, directory: DirectoryRepository, make_team
):
    """Test that the replacement comes from the old reviewer's current team."""
    await make_team("T", {"A": True, "B": True, "C": True})
    await service.create_pull_request("pr-1", "Title", "A")
    await make_team("X", {"E": True, "F": True})
    user_c = await directory.get_user("C")
    user_c.team_name = "X"
    await directory.session.commit()

    updated, new_reviewer = await service.reassign_reviewer("pr-1", "C")

    assert new_reviewer in {"E", "F"}
    assert sorted(updated.assigned_reviewers) == sorted(["B", new_reviewer])


@pytest.mark.asyncio
async def test_reassign_validates_input(service: PullRequestService, team_t):
    """Test INVALID_INPUT and NOT_FOUND ordering."""
    with pytest.raises(ReviewRosterError) as exc_info:
        await service.reassign_reviewer("", "B")
    assert exc_info.value.code == ErrorCode.INVALID_INPUT

    with pytest.raises(ReviewRosterError) as exc_info:
        await service.reassign_reviewer("pr-1", "")
    assert exc_info.value.code == ErrorCode.INVALID_INPUT

    with pytest.raises(ReviewRosterError) as exc_info:
        await service.reassign_reviewer("missing", "B")
    assert exc_info.value.code == ErrorCode.NOT_FOUND


@pytest.mark.asyncio
async def test_reviewer_rows_never_duplicate_through_service(
    pr_repo: PullRequestRepository, directory: DirectoryRepository, make_team
):
    """Test that repeated create/reassign calls never leave duplicate reviewers.

    The store's replace-onto-existing-reviewer branch only recovers from
    externally corrupted rows; the service always excludes current reviewers.
    """
    await make_team("T", {"A": True, "B": True, "C": True, "D": True, "E": True})
    service = PullRequestService(
        pr_repo, directory, selector=ReviewerSelector(random.Random(99))
    )
    rng = random.Random(7)

    for i in range(5):
        await service.create_pull_request(f"pr-{i}", f"Change {i}", rng.choice("ABCDE"))

    for _ in range(40):
        pull_request_id = f"pr-{rng.randrange(5)}"
        before = await _reviewers(pr_repo, pull_request_id)
        if not before:
            continue
        try:
            updated, _ = await service.reassign_reviewer(pull_request_id, rng.choice(before))
        except ReviewRosterError as e:
            assert e.code == ErrorCode.NO_CANDIDATE
            continue
        after = updated.assigned_reviewers
        assert len(after) == len(before)
        assert len(set(after)) == len(after)
        assert updated.author_id not in after


@pytest.mark.asyncio
async def test_get_pull_request(service: PullRequestService, team_t):
    """Test fetching a pull request by id."""
    await service.create_pull_request("pr-1", "Title", "A")

    pull_request = await service.get_pull_request("pr-1")
    assert pull_request.pull_request_name == "Title"

    with pytest.raises(ReviewRosterError) as exc_info:
        await service.get_pull_request("missing")
    assert exc_info.value.code == ErrorCode.NOT_FOUND


class _InterleavingDirectory(DirectoryRepository):
    """Directory that runs another operation during its first team lookup."""

    def __init__(self, session, on_first_lookup):
        super().__init__(session)
        self._on_first_lookup = on_first_lookup

    async def get_active_team_members(self, team_name: str):
        if self._on_first_lookup is not None:
            pending, self._on_first_lookup = self._on_first_lookup, None
            await pending()
        return await super().get_active_team_members(team_name)


@pytest.mark.asyncio
async def test_reassign_keeps_cardinality_when_interleaved(
    pr_repo: PullRequestRepository, directory: DirectoryRepository, session, make_team
):
    """Test a reassignment racing another one on the same pull request.

    While B is being replaced, D is swapped for C. The first reassignment
    picked C from its earlier read, so it must start over and choose D.
    """
    await make_team("T", {"A": True, "B": True, "C": True, "D": True})
    await pr_repo.create_pull_request(
        PullRequest(
            pull_request_id="pr-1",
            pull_request_name="Title",
            author_id="A",
            status=PullRequestStatus.OPEN.value,
        ),
        ["B", "D"],
    )
    other = PullRequestService(pr_repo, directory, selector=ReviewerSelector(random.Random(1)))

    async def swap_d_for_c():
        _, replaced_by = await other.reassign_reviewer("pr-1", "D")
        assert replaced_by == "C"

    racing = PullRequestService(
        pr_repo,
        _InterleavingDirectory(session, swap_d_for_c),
        selector=ReviewerSelector(random.Random(2)),
    )

    updated, new_reviewer = await racing.reassign_reviewer("pr-1", "B")

    assert new_reviewer == "D"
    assert sorted(updated.assigned_reviewers) == ["C", "D"]
    assert sorted(await _reviewers(pr_repo, "pr-1")) == ["C", "D"]
