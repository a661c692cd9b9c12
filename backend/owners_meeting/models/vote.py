"""Vote ORM model."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from owners_meeting.models.base import Base, CreatedAtMixin, IdMixin


class Vote(Base, IdMixin, CreatedAtMixin):
    """One voter's current choice on a proposal version."""

    __tablename__ = "votes"
    __table_args__ = (UniqueConstraint("proposal_version_id", "voter_id", name="uq_votes_version_voter"),)

    proposal_version_id: Mapped[int] = mapped_column(
        ForeignKey("proposal_versions.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    voter_id: Mapped[str] = mapped_column(String(255), nullable=False)
    voter_name: Mapped[str] = mapped_column(String(255), nullable=False)
    choice: Mapped[str] = mapped_column(String(16), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
