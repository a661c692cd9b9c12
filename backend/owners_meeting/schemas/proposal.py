"""Proposal and proposal version schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ProposalVersionRead(BaseModel):
    """Serialized proposal version."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    proposal_id: int
    version_number: int
    full_text: str
    rationale: str | None
    created_by: str | None
    is_active: bool
    created_at: datetime


class ProposalRead(BaseModel):
    """Serialized proposal."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    meeting_id: int
    agenda_item_id: int
    title: str
    summary: str | None
    effective_date: date | None
    status: str
    created_at: datetime
    updated_at: datetime


class ProposalWithVersionsRead(ProposalRead):
    """Proposal plus its full version history in version order."""

    versions: list[ProposalVersionRead]


class ProposalUpdateRequest(BaseModel):
    """Commissioner-editable proposal fields."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    summary: str | None = None
    effective_date: date | None = None
    status: Literal["draft", "tabled"] | None = None

    @model_validator(mode="after")
    def validate_non_empty_update(self) -> "ProposalUpdateRequest":
        if not any(
            value is not None
            for value in (self.title, self.summary, self.effective_date, self.status)
        ):
            raise ValueError("At least one field must be provided.")
        return self


class ProposalVersionCreate(BaseModel):
    """Payload for creating a new active version directly."""

    full_text: str
    rationale: str | None = None


class ActiveVersionTextUpdate(BaseModel):
    """Payload for editing the active version text in place."""

    full_text: str
