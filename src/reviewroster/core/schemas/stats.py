"""Statistics schemas."""
from pydantic import BaseModel


class UserReviewStats(BaseModel):
    """Review assignment count for one user."""
    user_id: str
    username: str
    review_count: int
    is_active: bool


class ReviewStats(BaseModel):
    """Schema for pull request and review statistics."""
    total_prs_created: int
    reviews_by_user: list[UserReviewStats]
