"""HTTP tests: session cookie handling, envelopes, and error status mapping."""

from __future__ import annotations

import unittest

from fastapi.testclient import TestClient

from meeting_case import MeetingTestCase
from owners_meeting.config import get_settings
from owners_meeting.db.dependencies import get_db
from owners_meeting.main import app
from owners_meeting.services.sessions import sign_session


class ApiRouteTests(MeetingTestCase):
    def setUp(self) -> None:
        super().setUp()

        def override_get_db():
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.commissioner = self._client(owner_id="owner-01", team_name="Virginia Founders", role="commissioner")
        self.owner = self._client(owner_id="owner-02", team_name="Blue Ridge Bruisers", role="owner")
        self.anonymous = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        super().tearDown()

    def _client(self, **payload: str) -> TestClient:
        settings = get_settings()
        client = TestClient(app)
        client.cookies.set(settings.session_cookie_name, sign_session({"league_id": "cfc", **payload}))
        return client

    def _create_proposal(self) -> tuple[int, int, int]:
        meeting = self.commissioner.post("/meetings", json={"club_year": 2026})
        self.assertEqual(meeting.status_code, 201)
        meeting_id = meeting.json()["data"]["id"]
        live = self.commissioner.patch(f"/meetings/{meeting_id}/status", json={"status": "live"})
        self.assertEqual(live.status_code, 200)
        item = self.commissioner.post(
            f"/meetings/{meeting_id}/agenda-items",
            json={"item_type": "proposal", "title": "Expand playoffs", "initial_text": "A"},
        )
        self.assertEqual(item.status_code, 201)
        proposal_id = item.json()["data"]["proposal_id"]
        active = self.commissioner.get(f"/proposals/{proposal_id}/active-version")
        return meeting_id, proposal_id, active.json()["data"]["id"]

    def test_health(self) -> None:
        response = self.anonymous.get("/health")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_session_route_reports_identity(self) -> None:
        response = self.commissioner.get("/session")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json()["data"],
            {"voter_id": "owner-01", "team_name": "Virginia Founders", "is_commissioner": True},
        )

    def test_missing_or_forged_session_is_unauthorized(self) -> None:
        self.assertEqual(self.anonymous.get("/session").status_code, 401)

        forged = TestClient(app)
        forged.cookies.set(get_settings().session_cookie_name, "e30.0000")
        response = forged.get("/meetings")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Unauthorized")

    def test_garbled_session_cookie_is_unauthorized(self) -> None:
        cookie = f"{get_settings().session_cookie_name}=abc.".encode("ascii") + "\u00e9".encode("utf-8")

        response = self.anonymous.get("/session", headers={"cookie": cookie})

        self.assertEqual(response.status_code, 401)

    def test_owner_cannot_run_commissioner_actions(self) -> None:
        self.assertEqual(self.owner.post("/meetings", json={"club_year": 2026}).status_code, 403)

        _, _, version_id = self._create_proposal()
        response = self.owner.post("/voting/open", json={"proposal_version_id": version_id})
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["detail"], "Forbidden")

    def test_empty_amendment_is_bad_request(self) -> None:
        _, proposal_id, _ = self._create_proposal()

        response = self.owner.post(f"/proposals/{proposal_id}/amendments", json={"proposed_text": "   "})

        self.assertEqual(response.status_code, 400)

    def test_voting_flow_over_http(self) -> None:
        _, proposal_id, version_id = self._create_proposal()
        body = {"proposal_version_id": version_id}

        self.assertEqual(self.commissioner.post("/voting/tally", json=body).status_code, 409)
        self.assertEqual(self.commissioner.post("/voting/open", json=body).status_code, 200)

        cast = self.owner.post("/votes", json={**body, "vote": "YES"})
        self.assertEqual(cast.status_code, 200)
        self.assertEqual(cast.json()["data"]["choice"], "yes")
        self.assertEqual(self.owner.post("/votes", json={**body, "vote": "maybe"}).status_code, 400)

        mine = self.owner.get("/votes", params={"proposal_version_id": version_id}).json()["data"]
        self.assertEqual(mine["my_vote"], "yes")
        self.assertIsNone(mine["roll_call"])

        self.assertEqual(self.commissioner.post("/voting/close", json=body).status_code, 200)
        tally = self.commissioner.post("/voting/tally", json=body)
        self.assertEqual(tally.status_code, 200)
        self.assertFalse(tally.json()["data"]["passed"])
        self.assertEqual(tally.json()["data"]["totals"]["yes"], 1)

        state = self.owner.get("/voting/state", params={"proposal_version_id": version_id}).json()["data"]
        self.assertEqual(state["status"], "tallied")
        proposal = self.owner.get(f"/proposals/{proposal_id}").json()["data"]
        self.assertEqual(proposal["status"], "failed")

    def test_locked_meeting_returns_conflict(self) -> None:
        _, _, version_id = self._create_proposal()

        lock = self.commissioner.post("/meetings/lock", json={"locked": True})
        self.assertEqual(lock.status_code, 200)
        self.assertTrue(lock.json()["data"]["locked"])

        response = self.commissioner.post("/voting/open", json={"proposal_version_id": version_id})
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["detail"], "Meeting is locked")

    def test_unknown_meeting_is_not_found(self) -> None:
        self.assertEqual(self.owner.get("/meetings/999").status_code, 404)


if __name__ == "__main__":
    unittest.main()
