"""SQLAlchemy metadata registry import for Alembic."""

from owners_meeting.models import (
    AgendaItem,
    Amendment,
    AuditEvent,
    Meeting,
    Proposal,
    ProposalVersion,
    Vote,
    VoteSession,
)
from owners_meeting.models.base import Base

__all__ = [
    "Base",
    "Meeting",
    "AgendaItem",
    "Proposal",
    "ProposalVersion",
    "Amendment",
    "VoteSession",
    "Vote",
    "AuditEvent",
]
