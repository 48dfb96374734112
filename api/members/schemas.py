"""
Pydantic schemas for team-member endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CreateMemberRequest(BaseModel):
    # Presence is checked in the service so the client gets "Name is required".
    name: str | None = Field(default=None, max_length=100)
    email: str | None = Field(default=None, max_length=255)


class UpdateMemberRequest(BaseModel):
    """
    Every field is optional; only the ones present in the body are written.
    """

    name: str | None = Field(default=None, max_length=100)
    email: str | None = Field(default=None, max_length=255)
