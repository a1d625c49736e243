from enum import Enum


class Action(str, Enum):
    """Actions a logged-in player may perform on their session counter."""

    RESET = "reset"
    PING = "ping"


# Raw bytes of entropy behind every session token.
SESSION_ID_BYTES = 16

SESSION_COOKIE = "sessionid"

__all__ = [
    "Action",
    "SESSION_ID_BYTES",
    "SESSION_COOKIE",
]
