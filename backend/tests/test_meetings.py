"""Service tests for meeting lifecycle, the voting lock, and the meeting record."""

from __future__ import annotations

import unittest

from sqlalchemy import select

from meeting_case import COMMISSIONER, OWNER, MeetingTestCase
from owners_meeting.errors import ConflictError, ForbiddenError, NotFoundError
from owners_meeting.models.audit_event import AuditEvent
from owners_meeting.schemas.meeting import AgendaItemCreate, MeetingCreate
from owners_meeting.services.agenda import create_agenda_item, list_agenda_items
from owners_meeting.services.amendments import promote_amendment, submit_amendment
from owners_meeting.services.meetings import (
    create_meeting,
    get_live_meeting,
    set_meeting_lock,
    update_meeting_status,
)
from owners_meeting.services.records import get_meeting_record
from owners_meeting.services.voting import close_voting, open_voting, tally_voting


class MeetingTests(MeetingTestCase):
    def test_only_one_meeting_may_be_live(self) -> None:
        live_id = self._seed_live_meeting()
        other = create_meeting(self.db, MeetingCreate(club_year=2027), COMMISSIONER)

        with self.assertRaises(ConflictError):
            update_meeting_status(self.db, other.id, "live", COMMISSIONER)

        update_meeting_status(self.db, live_id, "finalized", COMMISSIONER)
        promoted = update_meeting_status(self.db, other.id, "live", COMMISSIONER)
        self.assertEqual(promoted.status, "live")
        self.assertEqual(get_live_meeting(self.db).id, other.id)

    def test_meeting_creation_requires_commissioner(self) -> None:
        with self.assertRaises(ForbiddenError):
            create_meeting(self.db, MeetingCreate(club_year=2026), OWNER)

    def test_lock_requires_live_meeting(self) -> None:
        create_meeting(self.db, MeetingCreate(club_year=2026), COMMISSIONER)

        with self.assertRaises(NotFoundError):
            set_meeting_lock(self.db, True, COMMISSIONER)

    def test_lock_and_unlock_are_audited(self) -> None:
        meeting_id = self._seed_live_meeting()

        locked = set_meeting_lock(self.db, True, COMMISSIONER)
        self.assertEqual((locked.meeting_id, locked.locked), (meeting_id, True))
        set_meeting_lock(self.db, False, COMMISSIONER)

        events = self.db.scalars(select(AuditEvent).order_by(AuditEvent.id)).all()
        self.assertEqual([event.event_type for event in events], ["meeting_locked", "meeting_unlocked"])
        self.assertEqual(events[0].meeting_id, meeting_id)
        self.assertIsNone(events[0].proposal_id)
        self.assertEqual(events[0].payload_json, {"locked": True, "team": COMMISSIONER.team_name})

    def test_lock_requires_commissioner(self) -> None:
        self._seed_live_meeting()

        with self.assertRaises(ForbiddenError):
            set_meeting_lock(self.db, True, OWNER)

    def test_agenda_lists_in_sort_order_with_proposal_ids(self) -> None:
        meeting_id = self._seed_live_meeting()
        create_agenda_item(
            self.db,
            meeting_id,
            AgendaItemCreate(item_type="admin", title="Treasurer report", sort_order=2),
            COMMISSIONER,
        )
        proposal_item = create_agenda_item(
            self.db,
            meeting_id,
            AgendaItemCreate(item_type="proposal", title="Keeper rules", sort_order=1, initial_text="One keeper."),
            COMMISSIONER,
        )

        items = list_agenda_items(self.db, meeting_id)

        self.assertEqual([item.title for item in items], ["Keeper rules", "Treasurer report"])
        self.assertEqual(items[0].proposal_id, proposal_item.proposal_id)
        self.assertTrue(items[0].voting_required)
        self.assertIsNone(items[1].proposal_id)
        self.assertFalse(items[1].voting_required)

    def test_meeting_record_snapshot(self) -> None:
        meeting_id = self._seed_live_meeting()
        decided_id = self._seed_proposal("A", meeting_id=meeting_id)
        pending_id = self._seed_proposal("Draft rule", meeting_id=meeting_id)

        amendment = submit_amendment(self.db, decided_id, "B", OWNER)
        promote_amendment(self.db, amendment.id, COMMISSIONER)
        version_id = self._active_version_id(decided_id)
        open_voting(self.db, version_id, COMMISSIONER)
        self._cast(version_id, yes=8, no=4)
        close_voting(self.db, version_id, COMMISSIONER)
        tally_voting(self.db, version_id, COMMISSIONER)

        record = get_meeting_record(self.db, meeting_id)

        self.assertEqual(record.meeting.id, meeting_id)
        by_proposal = {entry.proposal.id: entry for entry in record.proposals}
        decided = by_proposal[decided_id]
        self.assertEqual(decided.proposal.status, "passed")
        self.assertEqual([v.version_number for v in decided.versions], [1, 2])
        self.assertEqual(decided.active_version.full_text, "B")
        self.assertEqual(decided.vote_session.status, "tallied")
        self.assertEqual(decided.vote_session.yes_count, 8)
        self.assertEqual(len(decided.roll_call), 12)

        pending = by_proposal[pending_id]
        self.assertEqual(pending.proposal.status, "draft")
        self.assertIsNone(pending.vote_session)
        self.assertIsNone(pending.roll_call)

    def test_unknown_meeting_record_is_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            get_meeting_record(self.db, 404)


if __name__ == "__main__":
    unittest.main()
