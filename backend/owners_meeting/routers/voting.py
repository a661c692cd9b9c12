"""Voting session and vote ledger routes."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from owners_meeting.auth import require_commissioner, require_team
from owners_meeting.db.dependencies import get_db
from owners_meeting.schemas.common import ApiResponse
from owners_meeting.schemas.voting import (
    TallyRead,
    VoteCastRequest,
    VoteCastResult,
    VoteSessionRead,
    VoteStateRead,
    VotingActionRequest,
    VotingStateRead,
)
from owners_meeting.services.sessions import Identity
from owners_meeting.services.votes import cast_vote, get_vote_state
from owners_meeting.services.voting import close_voting, get_voting_state, open_voting, tally_voting

router = APIRouter()


@router.post("/voting/open", response_model=ApiResponse[VoteSessionRead])
def post_open(
    payload: VotingActionRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_commissioner),
) -> ApiResponse[VoteSessionRead]:
    """Open voting on the active proposal version."""

    session = open_voting(db, payload.proposal_version_id, identity)
    return ApiResponse(data=VoteSessionRead.model_validate(session))


@router.post("/voting/close", response_model=ApiResponse[VoteSessionRead])
def post_close(
    payload: VotingActionRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_commissioner),
) -> ApiResponse[VoteSessionRead]:
    """Close voting."""

    session = close_voting(db, payload.proposal_version_id, identity)
    return ApiResponse(data=VoteSessionRead.model_validate(session))


@router.post("/voting/tally", response_model=ApiResponse[TallyRead])
def post_tally(
    payload: VotingActionRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_commissioner),
) -> ApiResponse[TallyRead]:
    """Tally a closed session against the pass threshold."""

    return ApiResponse(data=tally_voting(db, payload.proposal_version_id, identity))


@router.get("/voting/state", response_model=ApiResponse[VotingStateRead])
def get_state(
    proposal_version_id: int = Query(..., ge=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_team),
) -> ApiResponse[VotingStateRead]:
    """Pollable session state."""

    return ApiResponse(data=get_voting_state(db, proposal_version_id))


@router.post("/votes", response_model=ApiResponse[VoteCastResult])
def post_vote(
    payload: VoteCastRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_team),
) -> ApiResponse[VoteCastResult]:
    """Cast or change the caller's vote."""

    return ApiResponse(data=cast_vote(db, payload.proposal_version_id, payload.vote, identity))


@router.get("/votes", response_model=ApiResponse[VoteStateRead])
def get_votes(
    proposal_version_id: int = Query(..., ge=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_team),
) -> ApiResponse[VoteStateRead]:
    """Caller's vote, submitted count, and the roll call once tallied."""

    return ApiResponse(data=get_vote_state(db, proposal_version_id, identity))
