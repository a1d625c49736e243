"""Pydantic data schemas shared by the registry and the HTTP layer."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from .session import Session

# -----------------------------
# Registry records
# -----------------------------

class Account(BaseModel):
    """Stored account record. Never leaves the registry uncopied."""

    user_id: str
    password: str  # compared verbatim, no hashing
    uid: int
    session: Optional[Session] = None  # set on first successful login


class AccountView(BaseModel):
    """What a successful login hands back to the caller."""

    uid: int
    session_id: str


__all__ = [
    "Account",
    "AccountView",
]
