"""Login session value and session-token issuance."""
from __future__ import annotations

import secrets

from pydantic import BaseModel

from .constants import SESSION_ID_BYTES
from .errors import TokenGenerationFailed


class Session(BaseModel):
    """A player's current login: bearer token plus the ping counter.

    The object holds no lock of its own. It is only mutated on a private
    copy inside the registry's critical section and then stored back.
    """

    session_id: str
    ping_count: int = 0

    def check_session_id(self, session_id: str) -> bool:
        """Exact comparison against the current token; sessions never expire."""
        return self.session_id == session_id

    def increase(self, amount: int) -> None:
        self.ping_count += amount

    def reset(self) -> None:
        self.ping_count = 0


def new_session_id(length: int = SESSION_ID_BYTES) -> str:
    """Return a fresh token built from *length* random bytes.

    The bytes are URL-safe base64 encoded so the token can travel in a
    cookie without quoting.

    Raises
    ------
    TokenGenerationFailed
        If the operating system's entropy source is unavailable.
    """
    try:
        return secrets.token_urlsafe(length)
    except OSError as exc:
        raise TokenGenerationFailed(f"Token Generation Failed: {exc}") from exc


__all__ = ["Session", "new_session_id"]
