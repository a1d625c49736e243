import logging
import re

from fastapi import Request
from fastapi.responses import PlainTextResponse
from starlette.requests import ClientDisconnect

from .constants import SESSION_COOKIE
from .errors import BodyReadError, CookieMissing, GameBackendError, NumberParseError
from .registry import UserRegistry

logger = logging.getLogger(__name__)

_INT64_MIN, _INT64_MAX = -(1 << 63), (1 << 63) - 1
# Octal written with a bare leading zero, e.g. "010".
_LEGACY_OCTAL = re.compile(r"([+-]?)0([0-7_]+)")

# -----------------------------
# FastAPI dependency helpers
# -----------------------------

def get_registry(request: Request) -> UserRegistry:
    """Return the registry the application was built with."""
    return request.app.state.registry


# -----------------------------
# Request parsing
# -----------------------------

async def read_password(request: Request) -> str:
    """Return the raw request body, which carries the password verbatim."""
    try:
        body = await request.body()
        return body.decode("utf-8")
    except (ClientDisconnect, UnicodeDecodeError) as exc:
        raise BodyReadError(f"{BodyReadError.message}: {exc}") from exc


def get_session_id(request: Request) -> str:
    session_id = request.cookies.get(SESSION_COOKIE)
    if session_id is None:
        raise CookieMissing()
    return session_id


def parse_uid(raw: str) -> int:
    """Parse *raw* as a signed 64-bit integer literal.

    Accepts decimal, ``0x``/``0o``/``0b`` prefixes, a bare leading ``0`` for
    octal (``010`` is 8) and digit-separating underscores. Surrounding
    whitespace, non-ASCII digits and values outside the int64 range are
    rejected.
    """
    try:
        if not raw.isascii() or raw != raw.strip():
            raise ValueError("unexpected characters")
        legacy = _LEGACY_OCTAL.fullmatch(raw)
        value = int(f"{legacy[1]}0o{legacy[2]}", 0) if legacy else int(raw, 0)
    except ValueError as exc:
        raise NumberParseError(f'{NumberParseError.message}: "{raw}"') from exc
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise NumberParseError(f'{NumberParseError.message}: "{raw}" out of range')
    return value


# -----------------------------
# Failure rendering
# -----------------------------

def fail(msg: str, exc: GameBackendError) -> PlainTextResponse:
    """Log *exc* and render it to the client as ``<msg>: <exc>``."""
    logger.error("%s: %s", msg, exc)
    return PlainTextResponse(f"{msg}: {exc}\n", status_code=exc.status_code)


__all__ = [
    "get_registry",
    "read_password",
    "get_session_id",
    "parse_uid",
    "fail",
]
