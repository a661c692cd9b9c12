"""Service tests for proposal version history and the single-active-version rule."""

from __future__ import annotations

import unittest

from sqlalchemy import select, update

from meeting_case import COMMISSIONER, OWNER, MeetingTestCase
from owners_meeting.errors import ConflictError, ForbiddenError, InvalidStateError, ValidationError
from owners_meeting.models.audit_event import AuditEvent
from owners_meeting.models.proposal_version import ProposalVersion
from owners_meeting.schemas.proposal import ProposalUpdateRequest
from owners_meeting.services.proposals import (
    create_version,
    edit_active_version_text,
    get_active_version,
    get_proposal_with_versions,
    list_versions,
    update_proposal,
)
from owners_meeting.services.voting import open_voting


class ProposalVersionTests(MeetingTestCase):
    def test_proposal_item_starts_with_active_version_one(self) -> None:
        proposal_id = self._seed_proposal("Twelve teams make the playoffs.")

        versions = list_versions(self.db, proposal_id)
        self.assertEqual([v.version_number for v in versions], [1])
        self.assertTrue(versions[0].is_active)
        self.assertEqual(versions[0].full_text, "Twelve teams make the playoffs.")

        proposal = get_proposal_with_versions(self.db, proposal_id)
        self.assertEqual(proposal.status, "draft")
        self.assertEqual(len(proposal.versions), 1)

    def test_create_version_supersedes_previous_active(self) -> None:
        proposal_id = self._seed_proposal("A")

        created = create_version(self.db, proposal_id, "  B  ", COMMISSIONER, rationale="tighten wording")
        self.assertEqual(created.version_number, 2)
        self.assertEqual(created.full_text, "B")
        self.assertEqual(created.rationale, "tighten wording")

        third = create_version(self.db, proposal_id, "C", COMMISSIONER)
        self.assertEqual(third.version_number, 3)

        versions = list_versions(self.db, proposal_id)
        self.assertEqual([(v.version_number, v.is_active) for v in versions], [(1, False), (2, False), (3, True)])
        self.assertEqual(get_active_version(self.db, proposal_id).id, third.id)

        event_types = self.db.scalars(
            select(AuditEvent.event_type).where(AuditEvent.proposal_id == proposal_id).order_by(AuditEvent.id)
        ).all()
        self.assertEqual(event_types, ["version_created", "version_created"])

    def test_create_version_rejects_empty_text(self) -> None:
        proposal_id = self._seed_proposal("A")

        with self.assertRaises(ValidationError):
            create_version(self.db, proposal_id, "   ", COMMISSIONER)
        self.assertEqual(len(list_versions(self.db, proposal_id)), 1)

    def test_create_version_requires_commissioner(self) -> None:
        proposal_id = self._seed_proposal("A")

        with self.assertRaises(ForbiddenError):
            create_version(self.db, proposal_id, "B", OWNER)

    def test_create_version_refused_while_voting_in_progress(self) -> None:
        proposal_id = self._seed_proposal("A")
        open_voting(self.db, self._active_version_id(proposal_id), COMMISSIONER)

        with self.assertRaises(ConflictError):
            create_version(self.db, proposal_id, "B", COMMISSIONER)
        self.assertEqual(len(list_versions(self.db, proposal_id)), 1)

    def test_versions_without_active_row_are_invalid_state(self) -> None:
        proposal_id = self._seed_proposal("A")
        self.db.execute(
            update(ProposalVersion).where(ProposalVersion.proposal_id == proposal_id).values(is_active=False)
        )
        self.db.commit()

        with self.assertRaises(InvalidStateError) as ctx:
            get_active_version(self.db, proposal_id)
        self.assertEqual(ctx.exception.code, "no_active_version")

    def test_active_text_edit_rejects_empty_text(self) -> None:
        proposal_id = self._seed_proposal("A")

        with self.assertRaises(ValidationError):
            edit_active_version_text(self.db, proposal_id, "  \n ", COMMISSIONER)
        self.assertEqual(get_active_version(self.db, proposal_id).full_text, "A")

    def test_two_active_versions_are_invalid_state(self) -> None:
        proposal_id = self._seed_proposal("A")
        one_active = next(
            index for index in ProposalVersion.__table__.indexes if index.name == "uq_proposal_versions_one_active"
        )
        self.db.commit()
        one_active.drop(bind=self.engine)
        try:
            self.db.add(ProposalVersion(proposal_id=proposal_id, version_number=2, full_text="B", is_active=True))
            self.db.commit()

            with self.assertRaises(InvalidStateError) as ctx:
                get_active_version(self.db, proposal_id)
            self.assertEqual(ctx.exception.code, "multiple_active_versions")
        finally:
            self.db.rollback()
            self._reset_tables()
            one_active.create(bind=self.engine)

    def test_active_text_editable_until_voting_opens(self) -> None:
        proposal_id = self._seed_proposal("A")

        edited = edit_active_version_text(self.db, proposal_id, "A, corrected", COMMISSIONER)
        self.assertEqual(edited.version_number, 1)
        self.assertEqual(edited.full_text, "A, corrected")

        open_voting(self.db, edited.id, COMMISSIONER)
        with self.assertRaises(ConflictError):
            edit_active_version_text(self.db, proposal_id, "A, again", COMMISSIONER)
        self.assertEqual(get_active_version(self.db, proposal_id).full_text, "A, corrected")

    def test_update_proposal_fields_and_tabling(self) -> None:
        proposal_id = self._seed_proposal("A")

        proposal = update_proposal(
            self.db,
            proposal_id,
            ProposalUpdateRequest(title="Expand playoffs to six teams", status="tabled"),
            COMMISSIONER,
        )

        self.assertEqual(proposal.title, "Expand playoffs to six teams")
        self.assertEqual(proposal.status, "tabled")


if __name__ == "__main__":
    unittest.main()
