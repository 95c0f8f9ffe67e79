"""PullRequest model."""
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..storage.database import Base, UTCDateTime, utcnow


class PullRequestStatus(str, Enum):
    """Lifecycle status of a pull request."""
    OPEN = "OPEN"
    MERGED = "MERGED"


class PullRequest(Base):
    """Pull request under review.

    ``merged_at`` is set exactly once, on the transition to MERGED.
    """

    __tablename__ = "pull_requests"

    pull_request_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    pull_request_name: Mapped[str] = mapped_column(String(512), nullable=False)
    author_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.user_id"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(
        String(50), nullable=False, default=PullRequestStatus.OPEN.value, index=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, server_default=func.now(), nullable=False
    )
    merged_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

    # Relationships
    reviewers: Mapped[list["PullRequestReviewer"]] = relationship(
        "PullRequestReviewer",
        back_populates="pull_request",
        cascade="all, delete-orphan",
        order_by="PullRequestReviewer.id",
        lazy="selectin",
    )

    @property
    def assigned_reviewers(self) -> list[str]:
        """Identifiers of the currently assigned reviewers."""
        return [assignment.reviewer_id for assignment in self.reviewers]

    @property
    def is_merged(self) -> bool:
        return self.status == PullRequestStatus.MERGED.value

    def __repr__(self) -> str:
        return f"<PullRequest(pull_request_id='{self.pull_request_id}', status='{self.status}')>"
