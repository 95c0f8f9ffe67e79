"""Team model."""
from datetime import datetime

from sqlalchemy import String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..storage.database import Base, UTCDateTime, utcnow


class Team(Base):
    """Team of users; reviewers for a PR are drawn from the author's team."""

    __tablename__ = "teams"

    team_name: Mapped[str] = mapped_column(String(255), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    members: Mapped[list["User"]] = relationship(
        "User",
        back_populates="team",
        order_by="User.user_id",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Team(team_name='{self.team_name}')>"
