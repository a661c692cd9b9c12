"""ORM models package exports."""

from owners_meeting.models.agenda_item import AgendaItem
from owners_meeting.models.amendment import Amendment
from owners_meeting.models.audit_event import AuditEvent
from owners_meeting.models.meeting import Meeting
from owners_meeting.models.proposal import Proposal
from owners_meeting.models.proposal_version import ProposalVersion
from owners_meeting.models.vote import Vote
from owners_meeting.models.vote_session import VoteSession

__all__ = [
    "Meeting",
    "AgendaItem",
    "Proposal",
    "ProposalVersion",
    "Amendment",
    "VoteSession",
    "Vote",
    "AuditEvent",
]
