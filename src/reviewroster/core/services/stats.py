"""Review statistics."""
from ..schemas.stats import ReviewStats, UserReviewStats
from ..storage.repositories import StatsRepository
from .base import BaseService


class StatsService(BaseService):
    """Aggregates pull request counts and review load per user."""

    def __init__(self, stats: StatsRepository, **store_options):
        super().__init__(**store_options)
        self.stats = stats

    async def get_stats(self) -> ReviewStats:
        total = await self._call_store("count_pull_requests", self.stats.count_pull_requests)
        counts = await self._call_store("review_counts_by_user", self.stats.review_counts_by_user)

        return ReviewStats(
            total_prs_created=total,
            reviews_by_user=[
                UserReviewStats(
                    user_id=user.user_id,
                    username=user.username,
                    review_count=count,
                    is_active=user.is_active,
                )
                for user, count in counts
            ],
        )
