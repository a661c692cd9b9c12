"""Point-in-time meeting record for minutes generation."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from owners_meeting.models.agenda_item import AgendaItem
from owners_meeting.models.proposal import Proposal
from owners_meeting.schemas.meeting import MeetingRead
from owners_meeting.schemas.proposal import ProposalRead, ProposalVersionRead
from owners_meeting.schemas.record import MeetingRecordRead, ProposalRecordRead
from owners_meeting.schemas.voting import VoteSessionRead
from owners_meeting.services.meetings import get_meeting
from owners_meeting.services.proposals import get_active_version, list_versions
from owners_meeting.services.votes import get_roll_call
from owners_meeting.services.voting import get_vote_session


def get_meeting_record(db: Session, meeting_id: int) -> MeetingRecordRead:
    """Collect every proposal item with its versions, active version, and vote outcome."""

    meeting = get_meeting(db, meeting_id)
    rows = db.execute(
        select(AgendaItem, Proposal)
        .join(Proposal, Proposal.agenda_item_id == AgendaItem.id)
        .where(AgendaItem.meeting_id == meeting_id)
        .order_by(AgendaItem.sort_order.asc(), AgendaItem.id.asc())
    ).all()

    proposals: list[ProposalRecordRead] = []
    for item, proposal in rows:
        active = get_active_version(db, proposal.id)
        session = get_vote_session(db, active.id) if active is not None else None
        roll_call = get_roll_call(db, active.id) if active is not None else None
        proposals.append(
            ProposalRecordRead(
                agenda_item_id=item.id,
                agenda_title=item.title,
                proposal=ProposalRead.model_validate(proposal),
                versions=[ProposalVersionRead.model_validate(row) for row in list_versions(db, proposal.id)],
                active_version=ProposalVersionRead.model_validate(active) if active is not None else None,
                vote_session=VoteSessionRead.model_validate(session) if session is not None else None,
                roll_call=roll_call.entries if roll_call is not None else None,
            )
        )
    return MeetingRecordRead(meeting=MeetingRead.model_validate(meeting), proposals=proposals)
