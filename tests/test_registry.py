"""Behaviour of UserRegistry: signup, login and session actions."""
import itertools
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from gamebackend.errors import (
    DuplicateIdentifier,
    TokenGenerationFailed,
    UnknownAction,
    UnknownIdentifier,
    UnknownNumericId,
    WrongPassword,
    WrongSessionID,
)
from gamebackend.registry import UserRegistry


@pytest.fixture
def logged_in(registry: UserRegistry):
    registry.register("alice", "wonderland")
    view = registry.authenticate("alice", "wonderland")
    return view.uid, view.session_id


# --- register ---


def test_register_assigns_sequential_uids_from_one(registry: UserRegistry) -> None:
    for name in ("alice", "bob", "carol"):
        registry.register(name, "pw")
    assert [registry.lookup_identifier(uid) for uid in (1, 2, 3)] == ["alice", "bob", "carol"]
    assert registry.account_count() == 3


def test_duplicate_register_fails_and_keeps_state(registry: UserRegistry) -> None:
    registry.register("alice", "first")
    with pytest.raises(DuplicateIdentifier, match="Duplicate ID"):
        registry.register("alice", "second")

    assert registry.account_count() == 1
    # the original password still works and no uid was consumed
    assert registry.authenticate("alice", "first").uid == 1
    with pytest.raises(WrongPassword):
        registry.authenticate("alice", "second")
    registry.register("bob", "pw")
    assert registry.lookup_identifier(2) == "bob"


def test_concurrent_register_same_identifier_has_one_winner(registry: UserRegistry) -> None:
    start = threading.Barrier(16)

    def attempt(_: int) -> bool:
        start.wait()
        try:
            registry.register("racer", "pw")
            return True
        except DuplicateIdentifier:
            return False

    with ThreadPoolExecutor(max_workers=16) as pool:
        outcomes = list(pool.map(attempt, range(16)))

    assert outcomes.count(True) == 1
    assert registry.account_count() == 1
    with pytest.raises(UnknownNumericId):
        registry.lookup_identifier(2)


def test_uid_never_resolves_to_a_missing_account(registry: UserRegistry, monkeypatch: pytest.MonkeyPatch) -> None:
    storing_account = threading.Event()
    store_account = registry._accounts.set

    def slow_store(key, value) -> None:
        storing_account.set()
        time.sleep(0.3)
        store_account(key, value)

    monkeypatch.setattr(registry._accounts, "set", slow_store)
    signup = threading.Thread(target=registry.register, args=("alice", "pw"))
    signup.start()
    assert storing_account.wait(timeout=2)

    # the uid entry is already written; the lookup must wait for the account
    with pytest.raises(WrongSessionID):
        registry.perform_action("ping", 1, "x")
    assert registry.lookup_identifier(1) == "alice"
    signup.join(timeout=2)
    assert not signup.is_alive()


def test_concurrent_register_distinct_identifiers_get_unique_uids(registry: UserRegistry) -> None:
    names = [f"user{i}" for i in range(200)]
    with ThreadPoolExecutor(max_workers=16) as pool:
        list(pool.map(lambda n: registry.register(n, "pw"), names))

    uids = {registry.authenticate(n, "pw").uid for n in names}
    assert uids == set(range(1, 201))
    for n in names:
        assert registry.lookup_identifier(registry.authenticate(n, "pw").uid) == n


# --- authenticate ---


def test_authenticate_unknown_identifier(registry: UserRegistry) -> None:
    with pytest.raises(UnknownIdentifier, match="Unknown ID"):
        registry.authenticate("ghost", "pw")
    assert registry.account_count() == 0


def test_authenticate_wrong_password_does_not_touch_session(registry: UserRegistry, logged_in) -> None:
    uid, token = logged_in
    registry.perform_action("ping", uid, token)
    with pytest.raises(WrongPassword, match="Wrong Password"):
        registry.authenticate("alice", "WONDERLAND")
    assert registry.perform_action("ping", uid, token) == 2


def test_each_login_issues_a_new_token(registry: UserRegistry) -> None:
    registry.register("alice", "pw")
    tokens = [registry.authenticate("alice", "pw").session_id for _ in range(50)]
    assert len(set(tokens)) == 50


def test_relogin_invalidates_old_token_and_resets_counter(registry: UserRegistry, logged_in) -> None:
    uid, old_token = logged_in
    registry.perform_action("ping", uid, old_token)
    registry.perform_action("ping", uid, old_token)

    new_token = registry.authenticate("alice", "wonderland").session_id
    assert new_token != old_token
    with pytest.raises(WrongSessionID):
        registry.perform_action("ping", uid, old_token)
    assert registry.perform_action("ping", uid, new_token) == 1


def test_token_generation_failure_propagates_and_keeps_session() -> None:
    tokens = itertools.chain(["tok-1"], itertools.repeat(None))

    def flaky_factory() -> str:
        token = next(tokens)
        if token is None:
            raise TokenGenerationFailed()
        return token

    registry = UserRegistry(token_factory=flaky_factory)
    registry.register("alice", "pw")
    view = registry.authenticate("alice", "pw")
    assert view.session_id == "tok-1"

    with pytest.raises(TokenGenerationFailed):
        registry.authenticate("alice", "pw")
    assert registry.perform_action("ping", view.uid, "tok-1") == 1


def test_returned_view_is_a_copy(registry: UserRegistry, logged_in) -> None:
    uid, _ = logged_in
    view = registry.authenticate("alice", "wonderland")
    view.session_id = "forged"
    with pytest.raises(WrongSessionID):
        registry.perform_action("ping", uid, "forged")


# --- perform_action ---


def test_ping_and_reset_sequence(registry: UserRegistry, logged_in) -> None:
    uid, token = logged_in
    assert registry.perform_action("ping", uid, token) == 1
    assert registry.perform_action("ping", uid, token) == 2
    assert registry.perform_action("reset", uid, token) == 0
    assert registry.perform_action("ping", uid, token) == 1


def test_wrong_session_id_leaves_counter(registry: UserRegistry, logged_in) -> None:
    uid, token = logged_in
    registry.perform_action("ping", uid, token)
    for action in ("ping", "reset", "fly"):
        with pytest.raises(WrongSessionID, match="Wrong SessionID"):
            registry.perform_action(action, uid, "not-the-token")
    assert registry.perform_action("ping", uid, token) == 2


def test_unknown_action_leaves_counter(registry: UserRegistry, logged_in) -> None:
    uid, token = logged_in
    registry.perform_action("ping", uid, token)
    with pytest.raises(UnknownAction, match="Unknown Action"):
        registry.perform_action("fly", uid, token)
    with pytest.raises(UnknownAction):
        registry.perform_action("PING", uid, token)
    assert registry.perform_action("ping", uid, token) == 2


def test_action_before_any_login_is_wrong_session(registry: UserRegistry) -> None:
    registry.register("alice", "pw")
    with pytest.raises(WrongSessionID):
        registry.perform_action("ping", 1, "")


def test_action_for_unknown_uid(registry: UserRegistry) -> None:
    with pytest.raises(UnknownNumericId, match="Unknown UID"):
        registry.perform_action("ping", 42, "token")


def test_sessions_are_isolated_between_accounts(registry: UserRegistry) -> None:
    registry.register("alice", "pw")
    registry.register("bob", "pw")
    a = registry.authenticate("alice", "pw")
    b = registry.authenticate("bob", "pw")

    registry.perform_action("ping", a.uid, a.session_id)
    registry.perform_action("ping", a.uid, a.session_id)
    assert registry.perform_action("ping", b.uid, b.session_id) == 1
    with pytest.raises(WrongSessionID):
        registry.perform_action("ping", a.uid, b.session_id)


def test_concurrent_pings_are_all_counted(registry: UserRegistry, logged_in) -> None:
    uid, token = logged_in
    workers, per_worker = 16, 250
    start = threading.Barrier(workers)

    def hammer(_: int) -> list[int]:
        start.wait()
        return [registry.perform_action("ping", uid, token) for _ in range(per_worker)]

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = [count for batch in pool.map(hammer, range(workers)) for count in batch]

    total = workers * per_worker
    assert sorted(results) == list(range(1, total + 1))
    assert registry.perform_action("ping", uid, token) == total + 1
