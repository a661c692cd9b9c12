"""Agenda items; proposal items carry a proposal with an initial version."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from owners_meeting.models.agenda_item import AgendaItem
from owners_meeting.models.proposal import Proposal
from owners_meeting.models.proposal_version import ProposalVersion
from owners_meeting.schemas.meeting import AgendaItemCreate, AgendaItemRead
from owners_meeting.services.meetings import get_meeting
from owners_meeting.services.sessions import Identity, ensure_commissioner


def create_agenda_item(
    db: Session,
    meeting_id: int,
    payload: AgendaItemCreate,
    identity: Identity | None,
) -> AgendaItemRead:
    """Add an agenda item; a proposal item also gets a draft proposal and active version 1."""

    actor = ensure_commissioner(identity)
    get_meeting(db, meeting_id)
    is_proposal = payload.item_type == "proposal"
    item = AgendaItem(
        meeting_id=meeting_id,
        item_type=payload.item_type,
        title=payload.title.strip(),
        sort_order=payload.sort_order,
        voting_required=payload.voting_required if payload.voting_required is not None else is_proposal,
    )
    db.add(item)
    db.flush()

    proposal_id: int | None = None
    if is_proposal:
        proposal = Proposal(
            meeting_id=meeting_id,
            agenda_item_id=item.id,
            title=item.title,
            summary=(payload.summary or "").strip() or None,
            effective_date=payload.effective_date,
            status="draft",
        )
        db.add(proposal)
        db.flush()
        db.add(
            ProposalVersion(
                proposal_id=proposal.id,
                version_number=1,
                full_text=payload.initial_text,
                created_by=actor.team_name,
                is_active=True,
            )
        )
        proposal_id = proposal.id

    db.commit()
    db.refresh(item)
    return AgendaItemRead(
        **{**AgendaItemRead.model_validate(item).model_dump(), "proposal_id": proposal_id}
    )


def list_agenda_items(db: Session, meeting_id: int) -> list[AgendaItemRead]:
    """List a meeting's agenda in display order with proposal ids."""

    get_meeting(db, meeting_id)
    rows = db.execute(
        select(AgendaItem, Proposal.id)
        .outerjoin(Proposal, Proposal.agenda_item_id == AgendaItem.id)
        .where(AgendaItem.meeting_id == meeting_id)
        .order_by(AgendaItem.sort_order.asc(), AgendaItem.id.asc())
    ).all()
    return [
        AgendaItemRead(**{**AgendaItemRead.model_validate(item).model_dump(), "proposal_id": proposal_id})
        for item, proposal_id in rows
    ]
