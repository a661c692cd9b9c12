"""Agenda item ORM model."""

from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from owners_meeting.models.base import Base, CreatedAtMixin, IdMixin


class AgendaItem(Base, IdMixin, CreatedAtMixin):
    """Ordered meeting agenda entry; `proposal` items own one proposal."""

    __tablename__ = "agenda_items"

    meeting_id: Mapped[int] = mapped_column(
        ForeignKey("meetings.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    item_type: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    voting_required: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
