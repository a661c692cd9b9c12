"""Proposal and version store.

Each proposal owns an append-only list of versions numbered from 1. At most
one version is active at a time; once any version exists exactly one must be
active, and reads that find otherwise raise instead of guessing.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from owners_meeting.errors import ConflictError, InvalidStateError, NotFoundError, ValidationError
from owners_meeting.models.proposal import Proposal
from owners_meeting.models.proposal_version import ProposalVersion
from owners_meeting.models.vote_session import VoteSession
from owners_meeting.schemas.proposal import (
    ProposalRead,
    ProposalUpdateRequest,
    ProposalVersionRead,
    ProposalWithVersionsRead,
)
from owners_meeting.services.audit import record_audit_event
from owners_meeting.services.sessions import Identity, ensure_commissioner

logger = logging.getLogger(__name__)

DECIDED_STATUSES = frozenset({"passed", "failed"})
VOTING_IN_PROGRESS_STATUSES = frozenset({"open", "closed"})


def get_proposal(db: Session, proposal_id: int) -> Proposal:
    proposal = db.get(Proposal, proposal_id)
    if proposal is None:
        raise NotFoundError("Proposal not found")
    return proposal


def get_proposal_for_agenda_item(db: Session, agenda_item_id: int) -> Proposal:
    proposal = db.scalar(select(Proposal).where(Proposal.agenda_item_id == agenda_item_id))
    if proposal is None:
        raise NotFoundError("Proposal not found")
    return proposal


def get_proposal_with_versions(db: Session, proposal_id: int) -> ProposalWithVersionsRead:
    """Return a proposal and its version history."""

    proposal = get_proposal(db, proposal_id)
    return ProposalWithVersionsRead(
        **ProposalRead.model_validate(proposal).model_dump(),
        versions=[ProposalVersionRead.model_validate(row) for row in list_versions(db, proposal_id)],
    )


def list_versions(db: Session, proposal_id: int) -> list[ProposalVersion]:
    """List versions in ascending version order."""

    stmt = (
        select(ProposalVersion)
        .where(ProposalVersion.proposal_id == proposal_id)
        .order_by(ProposalVersion.version_number.asc())
    )
    return list(db.scalars(stmt).all())


def get_active_version(db: Session, proposal_id: int) -> ProposalVersion | None:
    """Return the active version, or None for a proposal with no versions yet."""

    active = list(
        db.scalars(
            select(ProposalVersion).where(
                ProposalVersion.proposal_id == proposal_id,
                ProposalVersion.is_active.is_(True),
            )
        ).all()
    )
    if len(active) > 1:
        raise InvalidStateError(
            f"Proposal {proposal_id} has {len(active)} active versions",
            code="multiple_active_versions",
        )
    if active:
        return active[0]

    any_version = db.scalar(
        select(ProposalVersion.id).where(ProposalVersion.proposal_id == proposal_id).limit(1)
    )
    if any_version is not None:
        raise InvalidStateError(
            f"Proposal {proposal_id} has versions but none is active",
            code="no_active_version",
        )
    return None


def next_version_number(db: Session, proposal_id: int) -> int:
    current = db.scalar(
        select(func.max(ProposalVersion.version_number)).where(ProposalVersion.proposal_id == proposal_id)
    )
    return int(current or 0) + 1


def append_version(
    db: Session,
    proposal_id: int,
    *,
    full_text: str,
    created_by: str | None,
    rationale: str | None = None,
) -> ProposalVersion:
    """Supersede the active version and add the next one, without committing.

    Both writes land in the caller's transaction so they commit or roll back together.
    """

    version_number = next_version_number(db, proposal_id)
    db.execute(
        update(ProposalVersion)
        .where(ProposalVersion.proposal_id == proposal_id, ProposalVersion.is_active.is_(True))
        .values(is_active=False)
    )
    version = ProposalVersion(
        proposal_id=proposal_id,
        version_number=version_number,
        full_text=full_text,
        rationale=rationale,
        created_by=created_by,
        is_active=True,
    )
    db.add(version)
    db.flush()
    return version


def ensure_proposal_undecided(proposal: Proposal) -> None:
    if proposal.status in DECIDED_STATUSES:
        raise ConflictError(f"Proposal has already {proposal.status}")


def ensure_no_voting_in_progress(db: Session, proposal_id: int) -> None:
    """Refuse to supersede a version whose vote is open or awaiting tally."""

    active = get_active_version(db, proposal_id)
    if active is None:
        return
    status = db.scalar(select(VoteSession.status).where(VoteSession.proposal_version_id == active.id))
    if status in VOTING_IN_PROGRESS_STATUSES:
        raise ConflictError("Voting is in progress on the active version")


def create_version(
    db: Session,
    proposal_id: int,
    full_text: str,
    identity: Identity | None,
    *,
    rationale: str | None = None,
) -> ProposalVersion:
    """Create the next version directly and make it the active one."""

    actor = ensure_commissioner(identity)
    clean_text = full_text.strip()
    if not clean_text:
        raise ValidationError("full_text cannot be empty")
    proposal = get_proposal(db, proposal_id)
    ensure_proposal_undecided(proposal)
    ensure_no_voting_in_progress(db, proposal_id)

    version = append_version(
        db,
        proposal_id,
        full_text=clean_text,
        created_by=actor.team_name,
        rationale=(rationale or "").strip() or None,
    )
    db.commit()
    db.refresh(version)
    logger.info(
        "proposal.version_created proposal_id=%s version_number=%d team=%s",
        proposal_id,
        version.version_number,
        actor.team_name,
    )
    record_audit_event(
        db,
        meeting_id=proposal.meeting_id,
        proposal_id=proposal_id,
        event_type="version_created",
        payload={"proposal_version_id": version.id, "version_number": version.version_number},
    )
    return version


def edit_active_version_text(
    db: Session,
    proposal_id: int,
    full_text: str,
    identity: Identity | None,
) -> ProposalVersion:
    """Edit the active version in place; only allowed before any vote session exists for it."""

    actor = ensure_commissioner(identity)
    clean_text = full_text.strip()
    if not clean_text:
        raise ValidationError("full_text cannot be empty")
    proposal = get_proposal(db, proposal_id)
    ensure_proposal_undecided(proposal)
    active = get_active_version(db, proposal_id)
    if active is None:
        raise NotFoundError("No active version found")
    has_session = db.scalar(
        select(VoteSession.id).where(VoteSession.proposal_version_id == active.id).limit(1)
    )
    if has_session is not None:
        raise ConflictError("Active version text cannot be edited after voting has opened")

    active.full_text = clean_text
    db.commit()
    db.refresh(active)
    record_audit_event(
        db,
        meeting_id=proposal.meeting_id,
        proposal_id=proposal_id,
        event_type="version_edited",
        payload={"proposal_version_id": active.id, "team": actor.team_name},
    )
    return active


def update_proposal(
    db: Session,
    proposal_id: int,
    payload: ProposalUpdateRequest,
    identity: Identity | None,
) -> Proposal:
    """Update commissioner-editable proposal fields."""

    ensure_commissioner(identity)
    proposal = get_proposal(db, proposal_id)
    if payload.title is not None:
        proposal.title = payload.title.strip()
    if payload.summary is not None:
        proposal.summary = payload.summary.strip() or None
    if payload.effective_date is not None:
        proposal.effective_date = payload.effective_date
    if payload.status is not None and payload.status != proposal.status:
        ensure_proposal_undecided(proposal)
        ensure_no_voting_in_progress(db, proposal_id)
        proposal.status = payload.status
    db.commit()
    db.refresh(proposal)
    return proposal
