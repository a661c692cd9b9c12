"""Read-only meeting record consumed by minutes generation."""

from __future__ import annotations

from pydantic import BaseModel

from owners_meeting.schemas.meeting import MeetingRead
from owners_meeting.schemas.proposal import ProposalRead, ProposalVersionRead
from owners_meeting.schemas.voting import RollCallEntryRead, VoteSessionRead


class ProposalRecordRead(BaseModel):
    """Point-in-time state of one proposal agenda item."""

    agenda_item_id: int
    agenda_title: str
    proposal: ProposalRead
    versions: list[ProposalVersionRead]
    active_version: ProposalVersionRead | None
    vote_session: VoteSessionRead | None
    roll_call: list[RollCallEntryRead] | None


class MeetingRecordRead(BaseModel):
    """Meeting with every proposal item in agenda order."""

    meeting: MeetingRead
    proposals: list[ProposalRecordRead]
