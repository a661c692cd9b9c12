"""Amendment schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class AmendmentCreate(BaseModel):
    """Suggested replacement text for a proposal."""

    proposed_text: str
    rationale: str | None = None


class AmendmentRead(BaseModel):
    """Serialized amendment."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    proposal_id: int
    proposed_text: str
    rationale: str | None
    submitted_by_team: str
    status: str
    promoted_version_id: int | None
    decided_by: str | None
    decided_at: datetime | None
    created_at: datetime
