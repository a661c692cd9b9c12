"""Per-version voting session state machine.

    not_open -> open -> closed -> tallied

Opening again while open (or after an early close) re-upserts the session and
resets its counts. Every transition is commissioner-only and refused while the
owning meeting is locked. The tally write is conditional on the session still
being closed, so two concurrent tallies cannot both record a result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from owners_meeting.config import Settings, get_settings
from owners_meeting.db.upsert import upsert
from owners_meeting.errors import ConflictError, NotFoundError
from owners_meeting.models.meeting import Meeting
from owners_meeting.models.proposal import Proposal
from owners_meeting.models.proposal_version import ProposalVersion
from owners_meeting.models.vote import Vote
from owners_meeting.models.vote_session import VoteSession
from owners_meeting.schemas.voting import TallyRead, VoteTotals, VotingStateRead
from owners_meeting.services.audit import record_audit_event
from owners_meeting.services.proposals import ensure_proposal_undecided
from owners_meeting.services.sessions import Identity, ensure_commissioner
from owners_meeting.services.tally import tally_votes

logger = logging.getLogger(__name__)

NOT_OPEN = "not_open"


@dataclass(slots=True)
class VotingContext:
    """Version, proposal, and meeting behind one voting target."""

    version: ProposalVersion
    proposal: Proposal
    meeting: Meeting


def resolve_voting_context(db: Session, proposal_version_id: int) -> VotingContext:
    version = db.get(ProposalVersion, proposal_version_id)
    if version is None:
        raise NotFoundError("Proposal version not found")
    proposal = db.get(Proposal, version.proposal_id)
    if proposal is None:
        raise NotFoundError("Proposal not found")
    meeting = db.get(Meeting, proposal.meeting_id)
    if meeting is None:
        raise NotFoundError("Meeting not found")
    return VotingContext(version=version, proposal=proposal, meeting=meeting)


def get_vote_session(db: Session, proposal_version_id: int) -> VoteSession | None:
    return db.scalar(select(VoteSession).where(VoteSession.proposal_version_id == proposal_version_id))


def open_voting(db: Session, proposal_version_id: int, identity: Identity | None) -> VoteSession:
    """Open (or reopen) voting on the proposal's active version with zeroed counts."""

    actor = ensure_commissioner(identity)
    context = resolve_voting_context(db, proposal_version_id)
    _ensure_unlocked(context.meeting)
    if not context.version.is_active:
        raise ConflictError("Voting may only be opened for the active proposal version")
    ensure_proposal_undecided(context.proposal)
    existing = get_vote_session(db, proposal_version_id)
    if existing is not None and existing.status == "tallied":
        raise ConflictError("Voting has already been tallied")

    upsert(
        db,
        VoteSession,
        values={
            "meeting_id": context.meeting.id,
            "proposal_id": context.proposal.id,
            "proposal_version_id": proposal_version_id,
            "status": "open",
            "opened_at": _utcnow(),
            "opened_by": actor.team_name,
            "closed_at": None,
            "closed_by": None,
            "tallied_at": None,
            "tallied_by": None,
            "yes_count": 0,
            "no_count": 0,
            "abstain_count": 0,
            "total_count": 0,
            "passed": None,
        },
        conflict_columns=["proposal_version_id"],
    )
    context.proposal.status = "open"
    meeting_id, proposal_id = context.meeting.id, context.proposal.id
    db.commit()

    logger.info(
        "voting.opened proposal_version_id=%s proposal_id=%s team=%s",
        proposal_version_id,
        proposal_id,
        actor.team_name,
    )
    record_audit_event(
        db,
        meeting_id=meeting_id,
        proposal_id=proposal_id,
        event_type="voting_opened",
        payload={"proposal_version_id": proposal_version_id, "team": actor.team_name},
    )
    return _require_session(db, proposal_version_id)


def close_voting(
    db: Session,
    proposal_version_id: int,
    identity: Identity | None,
    *,
    settings: Settings | None = None,
) -> VoteSession:
    """Stop accepting votes; counts are left for the tally."""

    settings = settings or get_settings()
    actor = ensure_commissioner(identity)
    context = resolve_voting_context(db, proposal_version_id)
    _ensure_unlocked(context.meeting)
    session = get_vote_session(db, proposal_version_id)
    if session is None or session.status != "open":
        raise ConflictError("Voting is not open")

    if settings.require_full_quorum_to_close:
        submitted = count_submitted_votes(db, proposal_version_id)
        if submitted < settings.total_owners:
            raise ConflictError(
                f"All {settings.total_owners} owners must vote before closing. "
                f"Remaining: {settings.total_owners - submitted}"
            )

    session.status = "closed"
    session.closed_at = _utcnow()
    session.closed_by = actor.team_name
    meeting_id, proposal_id = context.meeting.id, context.proposal.id
    db.commit()

    logger.info("voting.closed proposal_version_id=%s team=%s", proposal_version_id, actor.team_name)
    record_audit_event(
        db,
        meeting_id=meeting_id,
        proposal_id=proposal_id,
        event_type="voting_closed",
        payload={"proposal_version_id": proposal_version_id, "team": actor.team_name},
    )
    return _require_session(db, proposal_version_id)


def tally_voting(
    db: Session,
    proposal_version_id: int,
    identity: Identity | None,
    *,
    settings: Settings | None = None,
) -> TallyRead:
    """Count the closed session's votes, persist the verdict once, and decide the proposal."""

    settings = settings or get_settings()
    actor = ensure_commissioner(identity)
    context = resolve_voting_context(db, proposal_version_id)
    _ensure_unlocked(context.meeting)
    session = get_vote_session(db, proposal_version_id)
    if session is None:
        raise ConflictError("Voting has not been opened")
    if session.status != "closed":
        raise ConflictError("Voting must be closed before tally")

    choices = db.scalars(select(Vote.choice).where(Vote.proposal_version_id == proposal_version_id)).all()
    result = tally_votes(choices, settings.vote_threshold)

    written = db.execute(
        update(VoteSession)
        .where(
            VoteSession.proposal_version_id == proposal_version_id,
            VoteSession.status == "closed",
        )
        .values(
            status="tallied",
            tallied_at=_utcnow(),
            tallied_by=actor.team_name,
            yes_count=result.yes_count,
            no_count=result.no_count,
            abstain_count=result.abstain_count,
            total_count=result.total_count,
            passed=result.passed,
        )
        .execution_options(synchronize_session=False)
    )
    if written.rowcount != 1:
        db.rollback()
        raise ConflictError("Voting was already tallied by another request")

    context.proposal.status = "passed" if result.passed else "failed"
    meeting_id, proposal_id = context.meeting.id, context.proposal.id
    db.commit()

    logger.info(
        "voting.tallied proposal_version_id=%s yes=%d no=%d abstain=%d total=%d passed=%s",
        proposal_version_id,
        result.yes_count,
        result.no_count,
        result.abstain_count,
        result.total_count,
        result.passed,
    )
    record_audit_event(
        db,
        meeting_id=meeting_id,
        proposal_id=proposal_id,
        event_type="voting_tallied",
        payload={"proposal_version_id": proposal_version_id, **result.as_payload()},
    )
    return TallyRead(
        proposal_version_id=proposal_version_id,
        totals=VoteTotals(
            yes=result.yes_count,
            no=result.no_count,
            abstain=result.abstain_count,
            total=result.total_count,
        ),
        passed=result.passed,
        threshold=settings.vote_threshold,
    )


def get_voting_state(db: Session, proposal_version_id: int) -> VotingStateRead:
    """Cheap pollable state; counts and verdict are only exposed once tallied."""

    if db.get(ProposalVersion, proposal_version_id) is None:
        raise NotFoundError("Proposal version not found")
    session = get_vote_session(db, proposal_version_id)
    if session is None:
        return VotingStateRead(proposal_version_id=proposal_version_id, status=NOT_OPEN)

    state = VotingStateRead(
        proposal_version_id=proposal_version_id,
        status=session.status,
        opened_at=session.opened_at,
        closed_at=session.closed_at,
        tallied_at=session.tallied_at,
    )
    if session.status == "tallied":
        state.totals = session_totals(session)
        state.passed = session.passed
    return state


def session_totals(session: VoteSession) -> VoteTotals:
    return VoteTotals(
        yes=session.yes_count,
        no=session.no_count,
        abstain=session.abstain_count,
        total=session.total_count,
    )


def count_submitted_votes(db: Session, proposal_version_id: int) -> int:
    return int(
        db.scalar(select(func.count(Vote.id)).where(Vote.proposal_version_id == proposal_version_id)) or 0
    )


def _require_session(db: Session, proposal_version_id: int) -> VoteSession:
    session = get_vote_session(db, proposal_version_id)
    if session is None:
        raise NotFoundError("Vote session not found")
    return session


def _ensure_unlocked(meeting: Meeting) -> None:
    if meeting.locked:
        raise ConflictError("Meeting is locked")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)
