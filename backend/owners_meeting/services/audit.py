"""Append-only audit trail with best-effort writes."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from owners_meeting.models.audit_event import AuditEvent

logger = logging.getLogger(__name__)


def record_audit_event(
    db: Session,
    *,
    meeting_id: int,
    proposal_id: int | None,
    event_type: str,
    payload: dict[str, Any],
) -> AuditEvent | None:
    """Write one audit row after the primary mutation has committed.

    Failures are logged and discarded; the caller's committed change stands.
    """

    try:
        event = AuditEvent(
            meeting_id=meeting_id,
            proposal_id=proposal_id,
            event_type=event_type,
            payload_json=dict(payload),
        )
        db.add(event)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "audit.write_failed meeting_id=%s proposal_id=%s event_type=%s",
            meeting_id,
            proposal_id,
            event_type,
        )
        return None
    logger.info(
        "audit.recorded meeting_id=%s proposal_id=%s event_type=%s",
        meeting_id,
        proposal_id,
        event_type,
    )
    return event
