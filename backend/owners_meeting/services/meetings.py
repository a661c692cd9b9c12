"""Meeting lookup, lifecycle, and the voting lock."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from owners_meeting.errors import ConflictError, NotFoundError
from owners_meeting.models.meeting import Meeting
from owners_meeting.models.proposal import Proposal
from owners_meeting.schemas.meeting import MeetingCreate, MeetingLockResult
from owners_meeting.services.audit import record_audit_event
from owners_meeting.services.sessions import Identity, ensure_commissioner

logger = logging.getLogger(__name__)


def create_meeting(db: Session, payload: MeetingCreate, identity: Identity | None) -> Meeting:
    """Create a draft meeting for a club year."""

    ensure_commissioner(identity)
    meeting = Meeting(club_year=payload.club_year, meeting_date=payload.meeting_date, status="draft", locked=False)
    db.add(meeting)
    db.commit()
    db.refresh(meeting)
    return meeting


def list_meetings(db: Session) -> list[Meeting]:
    """List meetings, newest club year first."""

    stmt = select(Meeting).order_by(Meeting.club_year.desc(), Meeting.id.desc())
    return list(db.scalars(stmt).all())


def get_meeting(db: Session, meeting_id: int) -> Meeting:
    meeting = db.get(Meeting, meeting_id)
    if meeting is None:
        raise NotFoundError("Meeting not found")
    return meeting


def get_live_meeting(db: Session) -> Meeting | None:
    """Return the single meeting with status `live`, if any."""

    return db.scalar(select(Meeting).where(Meeting.status == "live").order_by(Meeting.id.asc()).limit(1))


def get_meeting_for_proposal(db: Session, proposal_id: int) -> Meeting:
    """Return the meeting that owns a proposal."""

    meeting = db.scalar(
        select(Meeting).join(Proposal, Proposal.meeting_id == Meeting.id).where(Proposal.id == proposal_id)
    )
    if meeting is None:
        raise NotFoundError("Meeting not found for proposal")
    return meeting


def update_meeting_status(db: Session, meeting_id: int, status: str, identity: Identity | None) -> Meeting:
    """Move a meeting between draft, live, and finalized; only one meeting may be live."""

    ensure_commissioner(identity)
    meeting = get_meeting(db, meeting_id)
    if status == "live":
        live = get_live_meeting(db)
        if live is not None and live.id != meeting.id:
            raise ConflictError(f"Meeting {live.id} is already live")
    meeting.status = status
    meeting.finalized_at = datetime.now(timezone.utc) if status == "finalized" else None
    db.commit()
    db.refresh(meeting)
    logger.info("meeting.status_changed meeting_id=%s status=%s", meeting.id, status)
    return meeting


def set_meeting_lock(db: Session, locked: bool, identity: Identity | None) -> MeetingLockResult:
    """Lock or unlock the live meeting; a locked meeting refuses voting transitions."""

    actor = ensure_commissioner(identity)
    meeting = get_live_meeting(db)
    if meeting is None:
        raise NotFoundError("No live meeting")
    meeting.locked = locked
    db.commit()
    meeting_id = meeting.id
    logger.info("meeting.lock_changed meeting_id=%s locked=%s team=%s", meeting_id, locked, actor.team_name)

    record_audit_event(
        db,
        meeting_id=meeting_id,
        proposal_id=None,
        event_type="meeting_locked" if locked else "meeting_unlocked",
        payload={"locked": locked, "team": actor.team_name},
    )
    return MeetingLockResult(meeting_id=meeting_id, locked=locked)
