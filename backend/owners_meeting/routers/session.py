"""Session identity route."""

from fastapi import APIRouter, Depends

from owners_meeting.auth import require_team
from owners_meeting.schemas.common import ApiResponse
from owners_meeting.schemas.session import IdentityRead
from owners_meeting.services.sessions import Identity

router = APIRouter()


@router.get("/session", response_model=ApiResponse[IdentityRead])
def get_current_session(identity: Identity = Depends(require_team)) -> ApiResponse[IdentityRead]:
    """Return who the signed session cookie belongs to."""

    return ApiResponse(data=IdentityRead.model_validate(identity))
