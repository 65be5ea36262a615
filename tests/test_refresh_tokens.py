from datetime import datetime, timedelta, timezone

import pytest
from sqlmodel import Session

from chirpy.core.errors import RefreshTokenExpired, RefreshTokenNotFound, RefreshTokenRevoked
from chirpy.db.store import SQLStore
from chirpy.models.base import as_utc
from chirpy.models.user import User
from chirpy.services.refresh_tokens import RefreshTokenManager, generate_refresh_token


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def user(store: SQLStore) -> User:
    return store.create_user("tokens@test.dev", "hashed")


@pytest.fixture
def manager(store: SQLStore, clock: FakeClock) -> RefreshTokenManager:
    return RefreshTokenManager(store, clock=clock)


def test_generated_tokens_are_256_bit_hex() -> None:
    tokens = {generate_refresh_token() for _ in range(100)}

    assert len(tokens) == 100
    for token in tokens:
        assert len(token) == 64
        int(token, 16)


def test_issue_persists_token_with_sixty_day_expiry(
    manager: RefreshTokenManager, store: SQLStore, user: User, clock: FakeClock
) -> None:
    issued = manager.issue(user.id)

    stored = store.get_refresh_token(issued.token)
    assert stored is not None
    assert stored.user_id == user.id
    assert as_utc(stored.expires_at) == clock.now + timedelta(days=60)
    assert stored.revoked_at is None


def test_resolve_returns_owner(manager: RefreshTokenManager, user: User) -> None:
    issued = manager.issue(user.id)

    assert manager.resolve(issued.token) == user.id


def test_multiple_live_tokens_per_user(manager: RefreshTokenManager, user: User) -> None:
    first = manager.issue(user.id)
    second = manager.issue(user.id)

    assert first.token != second.token
    assert manager.resolve(first.token) == user.id
    assert manager.resolve(second.token) == user.id


def test_resolve_unknown_token(manager: RefreshTokenManager) -> None:
    with pytest.raises(RefreshTokenNotFound):
        manager.resolve(generate_refresh_token())


def test_resolve_until_expiry(manager: RefreshTokenManager, user: User, clock: FakeClock) -> None:
    issued = manager.issue(user.id)

    clock.advance(timedelta(days=59, hours=23))
    assert manager.resolve(issued.token) == user.id

    clock.advance(timedelta(hours=1))
    with pytest.raises(RefreshTokenExpired):
        manager.resolve(issued.token)


def test_revoked_token_no_longer_resolves(
    manager: RefreshTokenManager, store: SQLStore, user: User, clock: FakeClock
) -> None:
    issued = manager.issue(user.id)
    clock.advance(timedelta(minutes=5))

    manager.revoke(issued.token)

    with pytest.raises(RefreshTokenRevoked):
        manager.resolve(issued.token)
    stored = store.get_refresh_token(issued.token)
    assert stored is not None
    assert as_utc(stored.revoked_at) == clock.now


def test_revoked_wins_over_expired(manager: RefreshTokenManager, user: User, clock: FakeClock) -> None:
    issued = manager.issue(user.id)
    manager.revoke(issued.token)
    clock.advance(timedelta(days=90))

    with pytest.raises(RefreshTokenRevoked):
        manager.resolve(issued.token)


def test_revoke_twice_keeps_first_timestamp(
    manager: RefreshTokenManager, store: SQLStore, user: User, clock: FakeClock
) -> None:
    issued = manager.issue(user.id)
    manager.revoke(issued.token)
    first_revoked_at = clock.now

    clock.advance(timedelta(hours=1))
    manager.revoke(issued.token)

    stored = store.get_refresh_token(issued.token)
    assert stored is not None
    assert as_utc(stored.revoked_at) == first_revoked_at


def test_revoke_unknown_token(manager: RefreshTokenManager) -> None:
    with pytest.raises(RefreshTokenNotFound):
        manager.revoke(generate_refresh_token())


def test_store_filters_revoked_and_expired(
    manager: RefreshTokenManager, store: SQLStore, user: User, clock: FakeClock
) -> None:
    live = manager.issue(user.id)
    revoked = manager.issue(user.id)
    manager.revoke(revoked.token)

    found = store.find_user_by_valid_refresh_token(live.token, clock.now)
    assert found is not None
    assert found.id == user.id
    assert store.find_user_by_valid_refresh_token(revoked.token, clock.now) is None
    assert store.find_user_by_valid_refresh_token(live.token, clock.now + timedelta(days=61)) is None


def test_timestamps_are_written_as_utc(engine, manager: RefreshTokenManager, user: User, clock: FakeClock) -> None:
    issued = manager.issue(user.id)
    manager.revoke(issued.token)

    with Session(engine) as other_session:
        stored = SQLStore(other_session).get_refresh_token(issued.token)

    assert stored is not None
    assert as_utc(stored.expires_at) == clock.now + timedelta(days=60)
    assert as_utc(stored.revoked_at) == clock.now
    assert as_utc(stored.created_at).tzinfo == timezone.utc
