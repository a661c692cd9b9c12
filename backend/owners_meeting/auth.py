"""FastAPI dependencies that resolve the caller from the signed session cookie."""

from fastapi import Depends, Request

from owners_meeting.config import Settings, get_settings
from owners_meeting.services.sessions import Identity, current_identity, ensure_commissioner, ensure_team


def get_identity(request: Request, settings: Settings = Depends(get_settings)) -> Identity | None:
    """Return the verified caller identity, or None without a valid session."""

    return current_identity(request.cookies.get(settings.session_cookie_name), settings=settings)


def require_team(identity: Identity | None = Depends(get_identity)) -> Identity:
    """Reject requests without a team session (401)."""

    return ensure_team(identity)


def require_commissioner(identity: Identity | None = Depends(get_identity)) -> Identity:
    """Reject requests without a session (401) or from a non-commissioner team (403)."""

    return ensure_commissioner(identity)
