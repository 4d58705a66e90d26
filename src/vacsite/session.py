"""Admin session state after a successful sign-in."""

from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field

#: Seconds before the backend's stated expiry at which a session counts
#: as expired.
EXPIRY_MARGIN_SECONDS: float = 30.0


class AdminSession(BaseModel):
    """Tokens returned by the backend's password grant.

    Parameters
    ----------
    access_token : str
        Bearer token sent on admin writes.
    refresh_token : str
        Token the backend accepts for a silent refresh (kept, not used).
    user_id : str
        The signed-in user's id.
    email : str
        The signed-in user's email.
    created_at : float
        Monotonic timestamp (``time.monotonic()``) when the session was
        created.
    expires_in : float
        Lifetime in seconds as reported by the backend.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    access_token: str = Field(min_length=1)
    refresh_token: str = ""
    user_id: str
    email: str = ""
    created_at: float = Field(default_factory=time.monotonic)
    expires_in: float = 3600.0

    @property
    def is_expired(self) -> bool:
        """Whether the session has reached its expiry (minus a safety margin)."""
        return self.age >= max(0.0, self.expires_in - EXPIRY_MARGIN_SECONDS)

    @property
    def age(self) -> float:
        """Seconds since the session was created."""
        return time.monotonic() - self.created_at
