"""Vote ledger: one current vote per (proposal version, voter)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from owners_meeting.config import Settings, get_settings
from owners_meeting.db.upsert import upsert
from owners_meeting.errors import ConflictError, NotFoundError, ValidationError
from owners_meeting.models.proposal_version import ProposalVersion
from owners_meeting.models.vote import Vote
from owners_meeting.schemas.voting import RollCallEntryRead, VoteCastResult, VoteStateRead
from owners_meeting.services.sessions import Identity, ensure_team
from owners_meeting.services.voting import NOT_OPEN, count_submitted_votes, get_vote_session, session_totals

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RollCall:
    """Submitted-vote view; `entries` stays None until the session is tallied."""

    status: str
    submitted_count: int
    entries: list[RollCallEntryRead] | None = field(default=None)


def normalize_choice(value: str | None, *, allow_abstain: bool = True) -> str:
    """Map user input onto the closed set of vote choices."""

    normalized = str(value or "").strip().lower()
    allowed = ("yes", "no", "abstain") if allow_abstain else ("yes", "no")
    if normalized not in allowed:
        raise ValidationError("vote must be YES, NO, or ABSTAIN" if allow_abstain else "vote must be YES or NO")
    return normalized


def cast_vote(
    db: Session,
    proposal_version_id: int,
    choice: str,
    identity: Identity | None,
    *,
    settings: Settings | None = None,
) -> VoteCastResult:
    """Record or overwrite the caller's vote while the session is open.

    The meeting lock does not apply here; only the session status gates casting.
    """

    settings = settings or get_settings()
    voter = ensure_team(identity)
    normalized = normalize_choice(choice, allow_abstain=settings.allow_abstain)
    if db.get(ProposalVersion, proposal_version_id) is None:
        raise NotFoundError("Proposal version not found")
    session = get_vote_session(db, proposal_version_id)
    if session is None or session.status != "open":
        raise ConflictError("Voting is not open")

    upsert(
        db,
        Vote,
        values={
            "proposal_version_id": proposal_version_id,
            "voter_id": voter.voter_id,
            "voter_name": voter.team_name,
            "choice": normalized,
            "updated_at": datetime.now(timezone.utc),
        },
        conflict_columns=["proposal_version_id", "voter_id"],
    )
    db.commit()
    logger.info(
        "votes.cast proposal_version_id=%s voter_id=%s",
        proposal_version_id,
        voter.voter_id,
    )
    return VoteCastResult(proposal_version_id=proposal_version_id, choice=normalized)


def get_my_vote(db: Session, proposal_version_id: int, voter_id: str) -> str | None:
    return db.scalar(
        select(Vote.choice).where(
            Vote.proposal_version_id == proposal_version_id,
            Vote.voter_id == voter_id,
        )
    )


def get_roll_call(db: Session, proposal_version_id: int) -> RollCall:
    """Return per-voter choices ordered by voter name, but only after tally.

    Before tally only the submitted count is disclosed so late voters are not
    swayed by earlier ones.
    """

    session = get_vote_session(db, proposal_version_id)
    status = session.status if session is not None else NOT_OPEN
    roll_call = RollCall(status=status, submitted_count=count_submitted_votes(db, proposal_version_id))
    if status != "tallied":
        return roll_call

    rows = db.scalars(
        select(Vote)
        .where(Vote.proposal_version_id == proposal_version_id)
        .order_by(Vote.voter_name.asc(), Vote.voter_id.asc())
    ).all()
    roll_call.entries = [RollCallEntryRead.model_validate(row) for row in rows]
    return roll_call


def get_vote_state(db: Session, proposal_version_id: int, identity: Identity | None) -> VoteStateRead:
    """Caller's view of a vote: own choice and count, plus totals and roll call once tallied."""

    voter = ensure_team(identity)
    if db.get(ProposalVersion, proposal_version_id) is None:
        raise NotFoundError("Proposal version not found")
    roll_call = get_roll_call(db, proposal_version_id)
    state = VoteStateRead(
        proposal_version_id=proposal_version_id,
        status=roll_call.status,
        submitted_count=roll_call.submitted_count,
        my_vote=get_my_vote(db, proposal_version_id, voter.voter_id),
    )
    if roll_call.entries is not None:
        session = get_vote_session(db, proposal_version_id)
        if session is not None:
            state.totals = session_totals(session)
            state.passed = session.passed
        state.roll_call = roll_call.entries
    return state
