"""Schemas for the caller identity."""

from pydantic import BaseModel, ConfigDict


class IdentityRead(BaseModel):
    """Identity resolved from the signed team session."""

    model_config = ConfigDict(from_attributes=True)

    voter_id: str
    team_name: str
    is_commissioner: bool
