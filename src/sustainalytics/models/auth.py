"""Auth-related data models."""

from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel


class TokenResponse(BaseModel):
    """Response from the /auth/token endpoint.

    Only access_token is required; the rest is kept for display and never
    used to decide expiry.
    """
    access_token: str
    token_type: str | None = None
    expires_in: int | None = None
    scope: str | None = None


class TokenStatus(BaseModel):
    """Current state of the cached access token."""
    has_token: bool
    token_type: str | None = None
    scope: str | None = None
    expires_in: int | None = None
    issued_at: datetime | None = None
