"""In-memory account and session registry.

The registry owns two indices:

* ``_accounts``: login identifier -> :class:`~gamebackend.schemas.Account`
* ``_identifiers``: numeric uid -> login identifier

and is the only code that mutates account records. It never logs and never
touches the transport; failures are raised as
:class:`~gamebackend.errors.RegistryError` subclasses and rendered by the
caller.
"""
from __future__ import annotations

from typing import Callable, Optional

from .constants import Action
from .errors import (
    DuplicateIdentifier,
    UnknownAction,
    UnknownIdentifier,
    UnknownNumericId,
    WrongPassword,
    WrongSessionID,
)
from .rwlock import ReadWriteLock
from .safemap import SafeMap
from .schemas import Account, AccountView
from .session import Session, new_session_id


class UserRegistry:
    """Account creation, login and per-session actions.

    Parameters
    ----------
    token_factory:
        Zero-argument callable returning a new session token. Defaults to
        :func:`gamebackend.session.new_session_id`.
    """

    def __init__(self, token_factory: Callable[[], str] = new_session_id) -> None:
        self._accounts: SafeMap[str, Account] = SafeMap()
        self._identifiers: SafeMap[int, str] = SafeMap()
        self._seq: int = 0
        # Held exclusively while an account enters both indices, shared by
        # every lookup that spans them.
        self._index_lock = ReadWriteLock()
        self._token_factory = token_factory

    # -----------------------------
    # Public operations
    # -----------------------------

    def register(self, user_id: str, password: str) -> None:
        """Create a new account for *user_id*.

        Uids are handed out sequentially starting at 1. The duplicate check,
        the uid assignment and both index writes happen under the index lock
        in write mode, so no lookup can see one entry without the other.

        Raises
        ------
        DuplicateIdentifier
            If *user_id* is already registered. Nothing is modified.
        """
        with self._index_lock.write():
            if self._accounts.contains(user_id):
                raise DuplicateIdentifier()
            uid = self._seq + 1
            self._identifiers.set(uid, user_id)
            self._accounts.set(user_id, Account(user_id=user_id, password=password, uid=uid))
            self._seq = uid

    def authenticate(self, user_id: str, password: str) -> AccountView:
        """Check credentials and start a fresh session.

        Every successful call issues a new token with a zeroed counter,
        replacing whatever session the account had before.

        Raises
        ------
        UnknownIdentifier, WrongPassword, TokenGenerationFailed
        """

        def _login(current: Optional[Account]) -> Account:
            if current is None:
                raise UnknownIdentifier()
            if current.password != password:
                raise WrongPassword()
            updated = current.model_copy(deep=True)
            updated.session = Session(session_id=self._token_factory())
            return updated

        with self._index_lock.read():
            account = self._accounts.update(user_id, _login)
        return AccountView(uid=account.uid, session_id=account.session.session_id)

    def perform_action(self, action: str, uid: int, session_id: str) -> int:
        """Apply *action* to the session of account *uid* and return the new count.

        Lookup, token validation, mutation and store happen while the account
        index is held exclusively, so concurrent pings are never lost.

        Raises
        ------
        UnknownNumericId, UnknownIdentifier, WrongSessionID, UnknownAction
        """

        def _apply(current: Optional[Account]) -> Account:
            if current is None:
                raise UnknownIdentifier()
            if current.session is None or not current.session.check_session_id(session_id):
                raise WrongSessionID()
            updated = current.model_copy(deep=True)
            if action == Action.RESET.value:
                updated.session.reset()
            elif action == Action.PING.value:
                updated.session.increase(1)
            else:
                raise UnknownAction()
            return updated

        with self._index_lock.read():
            user_id = self._resolve(uid)
            account = self._accounts.update(user_id, _apply)
        return account.session.ping_count

    # -----------------------------
    # Read-only helpers
    # -----------------------------

    def lookup_identifier(self, uid: int) -> str:
        """Return the login identifier registered under *uid*."""
        with self._index_lock.read():
            return self._resolve(uid)

    def account_count(self) -> int:
        return len(self._accounts)

    def _resolve(self, uid: int) -> str:
        # Caller holds the index lock.
        user_id, found = self._identifiers.get(uid)
        if not found:
            raise UnknownNumericId()
        return user_id


__all__ = ["UserRegistry"]
