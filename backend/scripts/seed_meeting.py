"""Seed a live owners meeting with one proposal and print a commissioner session token.

Usage (from repository root):
    python backend/scripts/seed_meeting.py

Usage (from backend directory):
    python scripts/seed_meeting.py
    # or
    python -m scripts.seed_meeting
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Make `owners_meeting` imports work whether the script is run from repo root or backend/.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from owners_meeting.config import get_settings
from owners_meeting.db.session import SessionLocal
from owners_meeting.schemas.meeting import AgendaItemCreate, MeetingCreate
from owners_meeting.services.agenda import create_agenda_item
from owners_meeting.services.meetings import create_meeting, get_live_meeting, update_meeting_status
from owners_meeting.services.proposals import get_active_version
from owners_meeting.services.sessions import Identity, sign_session


DEFAULT_CLUB_YEAR = 2026
DEFAULT_PROPOSAL_TEXT = (
    "Beginning with the next season, the playoff field expands from four to six teams. "
    "The top two seeds receive a first-round bye."
)


def parse_args() -> argparse.Namespace:
    """Parse script CLI arguments."""

    parser = argparse.ArgumentParser(description="Seed a live owners meeting with one proposal.")
    parser.add_argument(
        "--club-year",
        type=int,
        default=DEFAULT_CLUB_YEAR,
        help=f"Club year for the meeting (default: {DEFAULT_CLUB_YEAR})",
    )
    parser.add_argument(
        "--title",
        default="Expand the playoff field",
        help="Agenda title for the seeded proposal.",
    )
    parser.add_argument(
        "--owner-id",
        default="commissioner",
        help="owner_id written into the printed commissioner session token.",
    )
    return parser.parse_args()


def main() -> None:
    """Seed meeting data and print a short summary."""

    args = parse_args()
    settings = get_settings()
    commissioner = Identity(
        voter_id=args.owner_id,
        team_name=settings.commissioner_team_name,
        is_commissioner=True,
    )

    with SessionLocal() as db:
        meeting = get_live_meeting(db)
        if meeting is None:
            meeting = create_meeting(db, MeetingCreate(club_year=args.club_year), commissioner)
            meeting = update_meeting_status(db, meeting.id, "live", commissioner)
        item = create_agenda_item(
            db,
            meeting.id,
            AgendaItemCreate(item_type="proposal", title=args.title, initial_text=DEFAULT_PROPOSAL_TEXT),
            commissioner,
        )
        version = get_active_version(db, item.proposal_id)
        meeting_id = meeting.id
        version_id = version.id if version is not None else None

    token = sign_session(
        {
            "league_id": "cfc",
            "owner_id": commissioner.voter_id,
            "team_name": commissioner.team_name,
            "role": "commissioner",
        },
        settings=settings,
    )

    print("Seed complete")
    print(f"meeting_id={meeting_id}")
    print(f"proposal_id={item.proposal_id}")
    print(f"proposal_version_id={version_id}")
    print()
    print(f"Cookie {settings.session_cookie_name}={token}")
    print()
    print("Inspect:")
    print(f"  GET /meetings/{meeting_id}/agenda-items")
    print(f"  GET /proposals/{item.proposal_id}")
    print(f"  GET /voting/state?proposal_version_id={version_id}")


if __name__ == "__main__":
    main()
