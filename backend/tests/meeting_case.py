"""Shared in-memory database harness for service tests."""

from __future__ import annotations

import unittest

from sqlalchemy import create_engine, delete
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from owners_meeting.models.agenda_item import AgendaItem
from owners_meeting.models.amendment import Amendment
from owners_meeting.models.audit_event import AuditEvent
from owners_meeting.models.base import Base
from owners_meeting.models.meeting import Meeting
from owners_meeting.models.proposal import Proposal
from owners_meeting.models.proposal_version import ProposalVersion
from owners_meeting.models.vote import Vote
from owners_meeting.models.vote_session import VoteSession
from owners_meeting.schemas.meeting import AgendaItemCreate, MeetingCreate
from owners_meeting.services.agenda import create_agenda_item
from owners_meeting.services.meetings import create_meeting, update_meeting_status
from owners_meeting.services.proposals import get_active_version
from owners_meeting.services.sessions import Identity
from owners_meeting.services.votes import cast_vote

COMMISSIONER = Identity(voter_id="owner-01", team_name="Virginia Founders", is_commissioner=True)
OWNER = Identity(voter_id="owner-02", team_name="Blue Ridge Bruisers", is_commissioner=False)


def owner(index: int) -> Identity:
    return Identity(voter_id=f"owner-{index:02d}", team_name=f"Team {index:02d}", is_commissioner=False)


class MeetingTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = sessionmaker(bind=cls.engine, autoflush=False, autocommit=False, future=True)
        Base.metadata.create_all(cls.engine)

    @classmethod
    def tearDownClass(cls) -> None:
        Base.metadata.drop_all(cls.engine)
        cls.engine.dispose()

    def setUp(self) -> None:
        self.db: Session = self.SessionLocal()
        self._reset_tables()

    def tearDown(self) -> None:
        self.db.close()

    def _reset_tables(self) -> None:
        self.db.execute(delete(AuditEvent))
        self.db.execute(delete(Vote))
        self.db.execute(delete(VoteSession))
        self.db.execute(delete(Amendment))
        self.db.execute(delete(ProposalVersion))
        self.db.execute(delete(Proposal))
        self.db.execute(delete(AgendaItem))
        self.db.execute(delete(Meeting))
        self.db.commit()

    def _seed_live_meeting(self) -> int:
        meeting = create_meeting(self.db, MeetingCreate(club_year=2026), COMMISSIONER)
        update_meeting_status(self.db, meeting.id, "live", COMMISSIONER)
        return meeting.id

    def _seed_proposal(self, initial_text: str = "A", *, meeting_id: int | None = None) -> int:
        if meeting_id is None:
            meeting_id = self._seed_live_meeting()
        item = create_agenda_item(
            self.db,
            meeting_id,
            AgendaItemCreate(item_type="proposal", title="Expand the playoff field", initial_text=initial_text),
            COMMISSIONER,
        )
        return item.proposal_id

    def _active_version_id(self, proposal_id: int) -> int:
        return get_active_version(self.db, proposal_id).id

    def _cast(self, proposal_version_id: int, *, yes: int = 0, no: int = 0, abstain: int = 0) -> None:
        choices = ["yes"] * yes + ["no"] * no + ["abstain"] * abstain
        for index, choice in enumerate(choices, start=1):
            cast_vote(self.db, proposal_version_id, choice, owner(index))
