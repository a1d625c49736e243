"""Exception types raised by the registry and the HTTP layer.

Every error carries the short message shown to players (``str(exc)``) and
the HTTP status the transport answers with.
"""
from __future__ import annotations

from typing import Optional


class GameBackendError(Exception):
    """Base class for all errors this service reports to a client."""

    message: str = "Internal Error"
    status_code: int = 500

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.message)


# -----------------------------
# Registry errors
# -----------------------------

class RegistryError(GameBackendError):
    """Failure of a :class:`gamebackend.registry.UserRegistry` operation."""


class DuplicateIdentifier(RegistryError):
    message = "Duplicate ID"
    status_code = 409


class UnknownIdentifier(RegistryError):
    message = "Unknown ID"
    status_code = 404


class UnknownNumericId(RegistryError):
    message = "Unknown UID"
    status_code = 404


class WrongPassword(RegistryError):
    message = "Wrong Password"
    status_code = 401


class WrongSessionID(RegistryError):
    message = "Wrong SessionID"
    status_code = 401


class UnknownAction(RegistryError):
    message = "Unknown Action"
    status_code = 400


class TokenGenerationFailed(RegistryError):
    """The OS entropy source could not produce a session token."""

    message = "Token Generation Failed"
    status_code = 500


# -----------------------------
# Transport errors
# -----------------------------

class TransportError(GameBackendError):
    """Malformed request detected before the registry is consulted."""

    status_code = 400


class BodyReadError(TransportError):
    message = "request body could not be read"


class CookieMissing(TransportError):
    message = "sessionid cookie not present"
    status_code = 401


class NumberParseError(TransportError):
    message = "invalid numeric identifier"


__all__ = [
    "GameBackendError",
    "RegistryError",
    "DuplicateIdentifier",
    "UnknownIdentifier",
    "UnknownNumericId",
    "WrongPassword",
    "WrongSessionID",
    "UnknownAction",
    "TokenGenerationFailed",
    "TransportError",
    "BodyReadError",
    "CookieMissing",
    "NumberParseError",
]
