"""Meeting, agenda, lock, and meeting record routes."""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from owners_meeting.auth import require_commissioner, require_team
from owners_meeting.db.dependencies import get_db
from owners_meeting.schemas.common import ApiResponse
from owners_meeting.schemas.meeting import (
    AgendaItemCreate,
    AgendaItemRead,
    MeetingCreate,
    MeetingLockRequest,
    MeetingLockResult,
    MeetingRead,
    MeetingStatusUpdate,
)
from owners_meeting.schemas.record import MeetingRecordRead
from owners_meeting.services.agenda import create_agenda_item, list_agenda_items
from owners_meeting.services.meetings import (
    create_meeting,
    get_live_meeting,
    get_meeting,
    list_meetings,
    set_meeting_lock,
    update_meeting_status,
)
from owners_meeting.services.records import get_meeting_record
from owners_meeting.services.sessions import Identity

router = APIRouter(prefix="/meetings")


@router.get("", response_model=ApiResponse[list[MeetingRead]])
def get_meetings(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_team),
) -> ApiResponse[list[MeetingRead]]:
    """List all meetings."""

    return ApiResponse(data=[MeetingRead.model_validate(row) for row in list_meetings(db)])


@router.post("", response_model=ApiResponse[MeetingRead], status_code=201)
def post_meeting(
    payload: MeetingCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_commissioner),
) -> ApiResponse[MeetingRead]:
    """Create a draft meeting."""

    return ApiResponse(data=MeetingRead.model_validate(create_meeting(db, payload, identity)))


@router.get("/live", response_model=ApiResponse[MeetingRead | None])
def get_live(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_team),
) -> ApiResponse[MeetingRead | None]:
    """Return the live meeting, or null when none is live."""

    meeting = get_live_meeting(db)
    return ApiResponse(data=MeetingRead.model_validate(meeting) if meeting is not None else None)


@router.post("/lock", response_model=ApiResponse[MeetingLockResult])
def post_lock(
    payload: MeetingLockRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_commissioner),
) -> ApiResponse[MeetingLockResult]:
    """Lock or unlock voting on the live meeting."""

    return ApiResponse(data=set_meeting_lock(db, payload.locked, identity))


@router.get("/{meeting_id}", response_model=ApiResponse[MeetingRead])
def get_one_meeting(
    meeting_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_team),
) -> ApiResponse[MeetingRead]:
    return ApiResponse(data=MeetingRead.model_validate(get_meeting(db, meeting_id)))


@router.patch("/{meeting_id}/status", response_model=ApiResponse[MeetingRead])
def patch_meeting_status(
    payload: MeetingStatusUpdate,
    meeting_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_commissioner),
) -> ApiResponse[MeetingRead]:
    """Move a meeting between draft, live, and finalized."""

    meeting = update_meeting_status(db, meeting_id, payload.status, identity)
    return ApiResponse(data=MeetingRead.model_validate(meeting))


@router.get("/{meeting_id}/agenda-items", response_model=ApiResponse[list[AgendaItemRead]])
def get_agenda_items(
    meeting_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_team),
) -> ApiResponse[list[AgendaItemRead]]:
    """List agenda items in display order."""

    return ApiResponse(data=list_agenda_items(db, meeting_id))


@router.post("/{meeting_id}/agenda-items", response_model=ApiResponse[AgendaItemRead], status_code=201)
def post_agenda_item(
    payload: AgendaItemCreate,
    meeting_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_commissioner),
) -> ApiResponse[AgendaItemRead]:
    """Add an agenda item; proposal items get a proposal with version 1."""

    return ApiResponse(data=create_agenda_item(db, meeting_id, payload, identity))


@router.get("/{meeting_id}/record", response_model=ApiResponse[MeetingRecordRead])
def get_record(
    meeting_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_team),
) -> ApiResponse[MeetingRecordRead]:
    """Read-only snapshot of proposals and outcomes for minutes."""

    return ApiResponse(data=get_meeting_record(db, meeting_id))
