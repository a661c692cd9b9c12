"""Signed team-session tokens and caller identity resolution.

Token format: ``<base64url(json payload)>.<hex hmac-sha256 of the encoded payload>``.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
from dataclasses import dataclass
from typing import Any

from owners_meeting.config import Settings, get_settings
from owners_meeting.errors import ForbiddenError, UnauthorizedError

_REQUIRED_FIELDS = ("owner_id", "team_name", "role")


@dataclass(slots=True, frozen=True)
class Identity:
    """Caller resolved once per request and passed explicitly to services."""

    voter_id: str
    team_name: str
    is_commissioner: bool


def sign_session(payload: dict[str, Any], *, settings: Settings | None = None) -> str:
    """Serialize and sign a session payload."""

    settings = settings or get_settings()
    raw = json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")
    data = base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")
    return f"{data}.{_signature(data, settings.session_secret)}"


def read_session(token: str | None, *, settings: Settings | None = None) -> dict[str, Any] | None:
    """Return the verified session payload, or None for anything malformed or forged."""

    if not token:
        return None
    settings = settings or get_settings()
    data, sep, signature = token.rpartition(".")
    if not sep or not data:
        return None
    expected = _signature(data, settings.session_secret).encode("ascii")
    if not hmac.compare_digest(expected, signature.encode("utf-8", "surrogateescape")):
        return None
    try:
        payload = json.loads(base64.urlsafe_b64decode(data + "=" * (-len(data) % 4)))
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    for field in _REQUIRED_FIELDS:
        if not isinstance(payload.get(field), str) or not payload[field].strip():
            return None
    return payload


def current_identity(token: str | None, *, settings: Settings | None = None) -> Identity | None:
    """Resolve the caller behind a session token."""

    settings = settings or get_settings()
    payload = read_session(token, settings=settings)
    if payload is None:
        return None
    team_name = payload["team_name"].strip()
    return Identity(
        voter_id=payload["owner_id"].strip(),
        team_name=team_name,
        is_commissioner=(
            payload["role"] == "commissioner" or team_name == settings.commissioner_team_name
        ),
    )


def ensure_team(identity: Identity | None) -> Identity:
    """Require any authenticated team."""

    if identity is None:
        raise UnauthorizedError("Unauthorized")
    return identity


def ensure_commissioner(identity: Identity | None) -> Identity:
    """Require the commissioner role."""

    identity = ensure_team(identity)
    if not identity.is_commissioner:
        raise ForbiddenError("Forbidden")
    return identity


def _signature(data: str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), data.encode("utf-8", "surrogateescape"), hashlib.sha256).hexdigest()
