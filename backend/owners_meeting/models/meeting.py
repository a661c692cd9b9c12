"""Meeting ORM model."""

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from owners_meeting.models.base import Base, CreatedAtMixin, IdMixin


class Meeting(Base, IdMixin, CreatedAtMixin):
    """Annual owners meeting; `locked` freezes voting regardless of status."""

    __tablename__ = "meetings"

    club_year: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    meeting_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(32), default="draft", index=True, nullable=False)
    locked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    finalized_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
