"""Vote session ORM model."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from owners_meeting.models.base import Base, CreatedAtMixin, IdMixin


class VoteSession(Base, IdMixin, CreatedAtMixin):
    """Voting lifecycle for one proposal version: open, closed, tallied."""

    __tablename__ = "vote_sessions"

    meeting_id: Mapped[int] = mapped_column(
        ForeignKey("meetings.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    proposal_id: Mapped[int] = mapped_column(
        ForeignKey("proposals.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    proposal_version_id: Mapped[int] = mapped_column(
        ForeignKey("proposal_versions.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    status: Mapped[str] = mapped_column(String(32), default="open", nullable=False)
    opened_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    opened_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    closed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    closed_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    tallied_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    tallied_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    yes_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    no_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    abstain_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    passed: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
