"""Amendment routes."""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from owners_meeting.auth import require_commissioner, require_team
from owners_meeting.db.dependencies import get_db
from owners_meeting.schemas.amendment import AmendmentCreate, AmendmentRead
from owners_meeting.schemas.common import ApiResponse
from owners_meeting.services.amendments import (
    list_amendments,
    promote_amendment,
    reject_amendment,
    submit_amendment,
)
from owners_meeting.services.sessions import Identity

router = APIRouter()


@router.get("/proposals/{proposal_id}/amendments", response_model=ApiResponse[list[AmendmentRead]])
def get_amendments(
    proposal_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_team),
) -> ApiResponse[list[AmendmentRead]]:
    """List a proposal's amendments."""

    return ApiResponse(data=[AmendmentRead.model_validate(row) for row in list_amendments(db, proposal_id)])


@router.post(
    "/proposals/{proposal_id}/amendments",
    response_model=ApiResponse[AmendmentRead],
    status_code=201,
)
def post_amendment(
    payload: AmendmentCreate,
    proposal_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_team),
) -> ApiResponse[AmendmentRead]:
    """Submit suggested replacement text."""

    amendment = submit_amendment(db, proposal_id, payload.proposed_text, identity, rationale=payload.rationale)
    return ApiResponse(data=AmendmentRead.model_validate(amendment))


@router.post("/amendments/{amendment_id}/promote", response_model=ApiResponse[AmendmentRead])
def post_promote(
    amendment_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_commissioner),
) -> ApiResponse[AmendmentRead]:
    """Accept an amendment as the proposal's next active version."""

    return ApiResponse(data=AmendmentRead.model_validate(promote_amendment(db, amendment_id, identity)))


@router.post("/amendments/{amendment_id}/reject", response_model=ApiResponse[AmendmentRead])
def post_reject(
    amendment_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_commissioner),
) -> ApiResponse[AmendmentRead]:
    """Reject an amendment."""

    return ApiResponse(data=AmendmentRead.model_validate(reject_amendment(db, amendment_id, identity)))
