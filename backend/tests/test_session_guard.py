"""Tests for signed session tokens and role checks."""

from __future__ import annotations

import unittest

from owners_meeting.config import Settings
from owners_meeting.errors import ForbiddenError, UnauthorizedError
from owners_meeting.services.sessions import (
    Identity,
    current_identity,
    ensure_commissioner,
    ensure_team,
    read_session,
    sign_session,
)


class SessionGuardTests(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = Settings(session_secret="test-secret", commissioner_team_name="Virginia Founders")

    def _token(self, **overrides: str) -> str:
        payload = {"league_id": "cfc", "owner_id": "owner-07", "team_name": "Tidewater Tide", "role": "owner"}
        payload.update(overrides)
        return sign_session(payload, settings=self.settings)

    def test_signed_token_resolves_owner_identity(self) -> None:
        identity = current_identity(self._token(), settings=self.settings)

        self.assertEqual(identity, Identity(voter_id="owner-07", team_name="Tidewater Tide", is_commissioner=False))

    def test_commissioner_role_is_recognized(self) -> None:
        identity = current_identity(self._token(role="commissioner"), settings=self.settings)

        self.assertTrue(identity.is_commissioner)

    def test_commissioner_team_name_grants_commissioner(self) -> None:
        identity = current_identity(self._token(team_name="Virginia Founders"), settings=self.settings)

        self.assertTrue(identity.is_commissioner)

    def test_tampered_signature_is_rejected(self) -> None:
        token = self._token()
        data, _, signature = token.rpartition(".")
        forged = f"{data}.{'0' * len(signature)}"

        self.assertIsNone(read_session(forged, settings=self.settings))
        self.assertIsNone(current_identity(forged, settings=self.settings))

    def test_token_signed_with_other_secret_is_rejected(self) -> None:
        other = Settings(session_secret="another-secret")
        token = sign_session(
            {"owner_id": "owner-07", "team_name": "Tidewater Tide", "role": "commissioner"},
            settings=other,
        )

        self.assertIsNone(current_identity(token, settings=self.settings))

    def test_missing_or_malformed_tokens_are_rejected(self) -> None:
        for token in (None, "", "no-separator", ".abc", "e30.deadbeef", "eyJhIjoxfQ.\u00e9", "e30.\udcc3\udca9"):
            with self.subTest(token=token):
                self.assertIsNone(read_session(token, settings=self.settings))

    def test_payload_without_required_fields_is_rejected(self) -> None:
        token = sign_session({"owner_id": "owner-07", "team_name": "  ", "role": "owner"}, settings=self.settings)

        self.assertIsNone(read_session(token, settings=self.settings))

    def test_ensure_team_requires_identity(self) -> None:
        with self.assertRaises(UnauthorizedError):
            ensure_team(None)

    def test_ensure_commissioner_rejects_owner(self) -> None:
        owner = Identity(voter_id="owner-07", team_name="Tidewater Tide", is_commissioner=False)

        with self.assertRaises(ForbiddenError):
            ensure_commissioner(owner)
        with self.assertRaises(UnauthorizedError):
            ensure_commissioner(None)


if __name__ == "__main__":
    unittest.main()
