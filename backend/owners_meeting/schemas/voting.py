"""Voting session and vote ledger schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class VotingActionRequest(BaseModel):
    """Target of an open/close/tally action."""

    proposal_version_id: int = Field(..., ge=1)


class VoteSessionRead(BaseModel):
    """Full persisted vote session row."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    meeting_id: int
    proposal_id: int
    proposal_version_id: int
    status: str
    opened_at: datetime | None
    opened_by: str | None
    closed_at: datetime | None
    closed_by: str | None
    tallied_at: datetime | None
    tallied_by: str | None
    yes_count: int
    no_count: int
    abstain_count: int
    total_count: int
    passed: bool | None


class VoteTotals(BaseModel):
    """Counts persisted by the tally."""

    yes: int
    no: int
    abstain: int
    total: int


class TallyRead(BaseModel):
    """Outcome of a tally action."""

    proposal_version_id: int
    totals: VoteTotals
    passed: bool
    threshold: int


class VotingStateRead(BaseModel):
    """Pollable voting state; counts appear only after tally."""

    proposal_version_id: int
    status: str
    opened_at: datetime | None = None
    closed_at: datetime | None = None
    tallied_at: datetime | None = None
    totals: VoteTotals | None = None
    passed: bool | None = None


class VoteCastRequest(BaseModel):
    """A team's vote on a proposal version."""

    proposal_version_id: int = Field(..., ge=1)
    vote: str


class VoteCastResult(BaseModel):
    """Recorded vote after normalization."""

    proposal_version_id: int
    choice: str


class RollCallEntryRead(BaseModel):
    """One voter's disclosed choice."""

    model_config = ConfigDict(from_attributes=True)

    voter_name: str
    voter_id: str
    choice: str


class VoteStateRead(BaseModel):
    """Per-caller vote view; roll call is withheld until tally."""

    proposal_version_id: int
    status: str
    submitted_count: int
    my_vote: str | None
    totals: VoteTotals | None = None
    passed: bool | None = None
    roll_call: list[RollCallEntryRead] | None = None
