"""Meeting and agenda item schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class MeetingCreate(BaseModel):
    """Payload for creating a meeting."""

    club_year: int = Field(..., ge=1900, le=9999)
    meeting_date: date | None = None


class MeetingStatusUpdate(BaseModel):
    """Payload for moving a meeting between draft, live, and finalized."""

    status: Literal["draft", "live", "finalized"]


class MeetingLockRequest(BaseModel):
    """Payload for toggling the live meeting's lock."""

    locked: bool


class MeetingLockResult(BaseModel):
    """Lock toggle response."""

    meeting_id: int
    locked: bool


class MeetingRead(BaseModel):
    """Serialized meeting."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    club_year: int
    meeting_date: date | None
    status: str
    locked: bool
    finalized_at: datetime | None
    created_at: datetime


class AgendaItemCreate(BaseModel):
    """Payload for adding an agenda item; proposal items also create a proposal."""

    item_type: Literal["proposal", "admin"]
    title: str = Field(..., min_length=1, max_length=255)
    sort_order: int = 0
    voting_required: bool | None = None
    summary: str | None = None
    effective_date: date | None = None
    initial_text: str = ""


class AgendaItemRead(BaseModel):
    """Serialized agenda item with its proposal id, if any."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    meeting_id: int
    item_type: str
    title: str
    sort_order: int
    voting_required: bool
    proposal_id: int | None = None
    created_at: datetime
