"""PullRequestReviewer model: one row per (pull request, reviewer) pair."""
from datetime import datetime

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..storage.database import Base, UTCDateTime, utcnow


class PullRequestReviewer(Base):
    """Assignment of a reviewer to a pull request."""

    __tablename__ = "pull_request_reviewers"
    __table_args__ = (
        UniqueConstraint("pull_request_id", "reviewer_id", name="uq_pull_request_reviewer"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pull_request_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("pull_requests.pull_request_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    reviewer_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.user_id"), nullable=False, index=True
    )
    assigned_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    pull_request: Mapped["PullRequest"] = relationship("PullRequest", back_populates="reviewers")

    def __repr__(self) -> str:
        return (
            f"<PullRequestReviewer(pull_request_id='{self.pull_request_id}', "
            f"reviewer_id='{self.reviewer_id}')>"
        )
