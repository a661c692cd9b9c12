"""Proposal and version routes."""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from owners_meeting.auth import require_commissioner, require_team
from owners_meeting.db.dependencies import get_db
from owners_meeting.errors import NotFoundError
from owners_meeting.schemas.common import ApiResponse
from owners_meeting.schemas.proposal import (
    ActiveVersionTextUpdate,
    ProposalRead,
    ProposalUpdateRequest,
    ProposalVersionCreate,
    ProposalVersionRead,
    ProposalWithVersionsRead,
)
from owners_meeting.services.proposals import (
    create_version,
    edit_active_version_text,
    get_active_version,
    get_proposal,
    get_proposal_with_versions,
    list_versions,
    update_proposal,
)
from owners_meeting.services.sessions import Identity

router = APIRouter(prefix="/proposals")


@router.get("/{proposal_id}", response_model=ApiResponse[ProposalWithVersionsRead])
def get_one_proposal(
    proposal_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_team),
) -> ApiResponse[ProposalWithVersionsRead]:
    """Return a proposal with its version history."""

    return ApiResponse(data=get_proposal_with_versions(db, proposal_id))


@router.patch("/{proposal_id}", response_model=ApiResponse[ProposalRead])
def patch_proposal(
    payload: ProposalUpdateRequest,
    proposal_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_commissioner),
) -> ApiResponse[ProposalRead]:
    """Edit proposal title, summary, effective date, or table it."""

    return ApiResponse(data=ProposalRead.model_validate(update_proposal(db, proposal_id, payload, identity)))


@router.get("/{proposal_id}/versions", response_model=ApiResponse[list[ProposalVersionRead]])
def get_versions(
    proposal_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_team),
) -> ApiResponse[list[ProposalVersionRead]]:
    get_proposal(db, proposal_id)
    return ApiResponse(data=[ProposalVersionRead.model_validate(row) for row in list_versions(db, proposal_id)])


@router.post("/{proposal_id}/versions", response_model=ApiResponse[ProposalVersionRead], status_code=201)
def post_version(
    payload: ProposalVersionCreate,
    proposal_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_commissioner),
) -> ApiResponse[ProposalVersionRead]:
    """Create the next version and make it active."""

    version = create_version(db, proposal_id, payload.full_text, identity, rationale=payload.rationale)
    return ApiResponse(data=ProposalVersionRead.model_validate(version))


@router.get("/{proposal_id}/active-version", response_model=ApiResponse[ProposalVersionRead])
def get_active(
    proposal_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_team),
) -> ApiResponse[ProposalVersionRead]:
    """Return the version currently eligible for voting."""

    get_proposal(db, proposal_id)
    version = get_active_version(db, proposal_id)
    if version is None:
        raise NotFoundError("No active version found")
    return ApiResponse(data=ProposalVersionRead.model_validate(version))


@router.put("/{proposal_id}/active-version", response_model=ApiResponse[ProposalVersionRead])
def put_active_text(
    payload: ActiveVersionTextUpdate,
    proposal_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_commissioner),
) -> ApiResponse[ProposalVersionRead]:
    """Edit the active version text before voting opens."""

    version = edit_active_version_text(db, proposal_id, payload.full_text, identity)
    return ApiResponse(data=ProposalVersionRead.model_validate(version))
