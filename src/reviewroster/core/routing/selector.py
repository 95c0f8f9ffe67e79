"""Reviewer selection: candidate filtering and random choice."""
import logging
import random
from typing import Collection, Iterable, Optional, Sequence

from ..models import User

logger = logging.getLogger(__name__)


def eligible_pool(members: Iterable[User], excluded: Collection[str]) -> list[str]:
    """Ids of active members that are not excluded, in input order.

    Args:
        members: Candidate users (typically a team's active members)
        excluded: Ids that may not be chosen (author, current reviewers, ...)

    Returns:
        Distinct eligible user ids
    """
    pool: list[str] = []
    for member in members:
        if not member.is_active or member.user_id in excluded:
            continue
        if member.user_id not in pool:
            pool.append(member.user_id)
    return pool


class ReviewerSelector:
    """Picks reviewers uniformly at random without replacement.

    The randomness source is injectable so tests can pass a seeded
    ``random.Random``. The default ``random.SystemRandom`` keeps no state of
    its own and is safe to share between concurrent requests.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng if rng is not None else random.SystemRandom()

    def select(self, pool: Sequence[str], k: int) -> list[str]:
        """Choose ``min(len(pool), k)`` distinct ids from ``pool``.

        When the pool is no larger than ``k`` the whole pool is returned.
        Callers should treat the result as a set.

        Raises:
            ValueError: If k is negative
        """
        if k < 0:
            raise ValueError(f"Cannot select a negative number of reviewers: {k}")

        candidates = list(dict.fromkeys(pool))
        if len(candidates) <= k:
            return candidates
        return self._rng.sample(candidates, k)

    def pick_one(self, pool: Sequence[str]) -> Optional[str]:
        """Choose a single id, or None when the pool is empty."""
        chosen = self.select(pool, 1)
        return chosen[0] if chosen else None


# Global selector instance
_selector: Optional[ReviewerSelector] = None


def init_selector(seed: Optional[int] = None) -> ReviewerSelector:
    """Initialize the global selector.

    Args:
        seed: Seed for reproducible selection; None uses system randomness
    """
    global _selector
    if seed is None:
        _selector = ReviewerSelector()
    else:
        logger.info("Reviewer selection seeded with %d", seed)
        _selector = ReviewerSelector(random.Random(seed))
    return _selector


def get_selector() -> ReviewerSelector:
    """Get the global selector, creating an unseeded one on first use."""
    if _selector is None:
        return init_selector()
    return _selector
