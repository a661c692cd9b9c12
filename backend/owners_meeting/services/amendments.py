"""Amendment submission and commissioner review.

Amendments are scoped to the proposal, not to a specific version, so a pending
amendment survives a version bump and can still be promoted afterwards.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from owners_meeting.errors import ConflictError, NotFoundError, ValidationError
from owners_meeting.models.amendment import Amendment
from owners_meeting.services.audit import record_audit_event
from owners_meeting.services.proposals import (
    append_version,
    ensure_no_voting_in_progress,
    ensure_proposal_undecided,
    get_proposal,
)
from owners_meeting.services.sessions import Identity, ensure_commissioner, ensure_team

logger = logging.getLogger(__name__)


def list_amendments(db: Session, proposal_id: int) -> list[Amendment]:
    """List a proposal's amendments in submission order."""

    get_proposal(db, proposal_id)
    stmt = (
        select(Amendment)
        .where(Amendment.proposal_id == proposal_id)
        .order_by(Amendment.created_at.asc(), Amendment.id.asc())
    )
    return list(db.scalars(stmt).all())


def submit_amendment(
    db: Session,
    proposal_id: int,
    proposed_text: str,
    identity: Identity | None,
    *,
    rationale: str | None = None,
) -> Amendment:
    """Record a team's suggested replacement text as a pending amendment."""

    submitter = ensure_team(identity)
    if not proposed_text or not proposed_text.strip():
        raise ValidationError("proposed_text cannot be empty")
    proposal = get_proposal(db, proposal_id)
    ensure_proposal_undecided(proposal)

    amendment = Amendment(
        proposal_id=proposal_id,
        proposed_text=proposed_text,
        rationale=(rationale or "").strip() or None,
        submitted_by_voter_id=submitter.voter_id,
        submitted_by_team=submitter.team_name,
        status="pending",
    )
    db.add(amendment)
    db.commit()
    db.refresh(amendment)
    logger.info(
        "amendment.submitted amendment_id=%s proposal_id=%s team=%s",
        amendment.id,
        proposal_id,
        submitter.team_name,
    )
    return amendment


def promote_amendment(db: Session, amendment_id: int, identity: Identity | None) -> Amendment:
    """Accept an amendment: its text becomes the proposal's next active version."""

    actor = ensure_commissioner(identity)
    amendment = _get_pending_amendment(db, amendment_id)
    proposal = get_proposal(db, amendment.proposal_id)
    ensure_proposal_undecided(proposal)
    ensure_no_voting_in_progress(db, proposal.id)

    version = append_version(
        db,
        proposal.id,
        full_text=amendment.proposed_text,
        created_by=actor.team_name,
        rationale=amendment.rationale,
    )
    amendment.status = "promoted"
    amendment.promoted_version_id = version.id
    amendment.decided_by = actor.team_name
    amendment.decided_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(amendment)

    logger.info(
        "amendment.promoted amendment_id=%s proposal_id=%s version_number=%d",
        amendment.id,
        proposal.id,
        version.version_number,
    )
    record_audit_event(
        db,
        meeting_id=proposal.meeting_id,
        proposal_id=proposal.id,
        event_type="amendment_promoted",
        payload={
            "amendment_id": amendment.id,
            "proposal_version_id": version.id,
            "version_number": version.version_number,
            "team": actor.team_name,
        },
    )
    return amendment


def reject_amendment(db: Session, amendment_id: int, identity: Identity | None) -> Amendment:
    """Reject an amendment; versions are untouched."""

    actor = ensure_commissioner(identity)
    amendment = _get_pending_amendment(db, amendment_id)
    proposal = get_proposal(db, amendment.proposal_id)
    amendment.status = "rejected"
    amendment.decided_by = actor.team_name
    amendment.decided_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(amendment)

    logger.info("amendment.rejected amendment_id=%s proposal_id=%s", amendment.id, proposal.id)
    record_audit_event(
        db,
        meeting_id=proposal.meeting_id,
        proposal_id=proposal.id,
        event_type="amendment_rejected",
        payload={"amendment_id": amendment.id, "team": actor.team_name},
    )
    return amendment


def _get_pending_amendment(db: Session, amendment_id: int) -> Amendment:
    amendment = db.get(Amendment, amendment_id)
    if amendment is None:
        raise NotFoundError("Amendment not found")
    if amendment.status != "pending":
        raise ConflictError(f"Amendment is already {amendment.status}")
    return amendment
