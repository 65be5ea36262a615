from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from jose import jwt

from chirpy.core.errors import (
    BadRequest,
    EmailTaken,
    Forbidden,
    Internal,
    InvalidCredentials,
    StorageError,
    Unauthorized,
)
from chirpy.core.security import create_access_token, validate_access_token
from chirpy.db.store import SQLStore
from chirpy.models.base import as_utc
from chirpy.services.refresh_tokens import RefreshTokenManager
from chirpy.services.sessions import SessionOrchestrator, access_token_ttl

SECRET = "orchestrator-secret"


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime.now(timezone.utc))


@pytest.fixture
def auth(store: SQLStore, clock: FakeClock) -> SessionOrchestrator:
    return SessionOrchestrator(store, SECRET, refresh_tokens=RefreshTokenManager(store, clock=clock))


def bearer(token: str) -> str:
    return f"Bearer {token}"


def test_register_login_refresh_revoke_flow(auth: SessionOrchestrator) -> None:
    profile = auth.register("a@example.com", "pw123")

    result = auth.login("a@example.com", "pw123")
    assert result.user.id == profile.id
    assert result.user.email == "a@example.com"
    assert auth.authorize(bearer(result.access_token)) == profile.id

    new_access_token = auth.refresh(bearer(result.refresh_token))
    assert auth.authorize(bearer(new_access_token)) == profile.id

    auth.revoke(bearer(result.refresh_token))
    with pytest.raises(Unauthorized):
        auth.refresh(bearer(result.refresh_token))

    # access tokens are not revocable
    assert auth.authorize(bearer(result.access_token)) == profile.id
    assert auth.authorize(bearer(new_access_token)) == profile.id


def test_profile_never_carries_password_hash(auth: SessionOrchestrator) -> None:
    auth.register("a@example.com", "pw123")
    result = auth.login("a@example.com", "pw123")

    assert not hasattr(result.user, "hashed_password")


def test_register_rejects_taken_email(auth: SessionOrchestrator) -> None:
    auth.register("a@example.com", "pw123")

    with pytest.raises(EmailTaken):
        auth.register("a@example.com", "other")


def test_email_is_case_sensitive(auth: SessionOrchestrator) -> None:
    auth.register("a@example.com", "pw123")

    with pytest.raises(InvalidCredentials):
        auth.login("A@example.com", "pw123")


def test_unknown_email_and_wrong_password_look_identical(auth: SessionOrchestrator) -> None:
    auth.register("a@example.com", "pw123")

    with pytest.raises(InvalidCredentials) as wrong_password:
        auth.login("a@example.com", "wrong")
    with pytest.raises(InvalidCredentials) as unknown_email:
        auth.login("nobody@example.com", "pw123")

    assert type(wrong_password.value) is type(unknown_email.value)
    assert wrong_password.value.message == unknown_email.value.message
    assert wrong_password.value.__cause__ is None
    assert unknown_email.value.__cause__ is None


@pytest.mark.parametrize(
    ("requested", "expected_seconds"),
    [(None, 3600), (60, 60), (3600, 3600), (0, 3600), (-5, 3600), (7200, 3600)],
)
def test_login_honors_short_ttl_only(auth: SessionOrchestrator, requested, expected_seconds) -> None:
    auth.register("a@example.com", "pw123")
    result = auth.login("a@example.com", "pw123", expires_in_seconds=requested)

    claims = jwt.get_unverified_claims(result.access_token)
    assert claims["exp"] - claims["iat"] == expected_seconds


def test_access_token_ttl_helper() -> None:
    assert access_token_ttl(None) == timedelta(hours=1)
    assert access_token_ttl(1) == timedelta(seconds=1)
    assert access_token_ttl(3601) == timedelta(hours=1)


def test_login_fails_whole_when_refresh_token_not_persisted(store: SQLStore, monkeypatch) -> None:
    auth = SessionOrchestrator(store, SECRET)
    auth.register("a@example.com", "pw123")

    def broken_create_refresh_token(*_args, **_kwargs):
        raise StorageError()

    monkeypatch.setattr(store, "create_refresh_token", broken_create_refresh_token)

    with pytest.raises(Internal):
        auth.login("a@example.com", "pw123")


def test_register_login_refresh_with_stored_timestamps(store: SQLStore) -> None:
    auth = SessionOrchestrator(store, SECRET)
    profile = auth.register("a@example.com", "pw123")
    result = auth.login("a@example.com", "pw123")

    stored = store.get_refresh_token(result.refresh_token)
    assert stored is not None
    assert as_utc(stored.expires_at) > datetime.now(timezone.utc) + timedelta(days=59)
    assert validate_access_token(auth.refresh(bearer(result.refresh_token)), SECRET) == profile.id


def test_refresh_collapses_failure_kinds(auth: SessionOrchestrator, clock: FakeClock) -> None:
    auth.register("a@example.com", "pw123")
    revoked = auth.login("a@example.com", "pw123").refresh_token
    expired = auth.login("a@example.com", "pw123").refresh_token
    auth.revoke(bearer(revoked))

    messages = set()
    with pytest.raises(Unauthorized) as unknown_error:
        auth.refresh(bearer("0" * 64))
    messages.add(unknown_error.value.message)
    with pytest.raises(Unauthorized) as revoked_error:
        auth.refresh(bearer(revoked))
    messages.add(revoked_error.value.message)

    clock.now = clock.now + timedelta(days=61)
    with pytest.raises(Unauthorized) as expired_error:
        auth.refresh(bearer(expired))
    messages.add(expired_error.value.message)

    assert len(messages) == 1


def test_refresh_does_not_rotate_token(auth: SessionOrchestrator, store: SQLStore) -> None:
    profile = auth.register("a@example.com", "pw123")
    refresh_token = auth.login("a@example.com", "pw123").refresh_token
    before = store.get_refresh_token(refresh_token)
    assert before is not None
    expires_at = as_utc(before.expires_at)

    first = auth.refresh(bearer(refresh_token))
    second = auth.refresh(bearer(refresh_token))

    assert validate_access_token(first, SECRET) == profile.id
    assert validate_access_token(second, SECRET) == profile.id
    after = store.get_refresh_token(refresh_token)
    assert after is not None
    assert after.token == refresh_token
    assert as_utc(after.expires_at) == expires_at
    assert after.revoked_at is None


def test_refresh_and_revoke_require_bearer(auth: SessionOrchestrator) -> None:
    with pytest.raises(BadRequest):
        auth.refresh(None)
    with pytest.raises(BadRequest):
        auth.revoke("Basic abc")


def test_revoke_unknown_and_repeated_tokens_succeed(auth: SessionOrchestrator) -> None:
    auth.register("a@example.com", "pw123")
    refresh_token = auth.login("a@example.com", "pw123").refresh_token

    auth.revoke(bearer("f" * 64))
    auth.revoke(bearer(refresh_token))
    auth.revoke(bearer(refresh_token))


@pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer not-a-jwt", "Token abc"])
def test_authorize_rejects_bad_headers(auth: SessionOrchestrator, header) -> None:
    with pytest.raises(Unauthorized):
        auth.authorize(header)


def test_authorize_rejects_expired_and_foreign_tokens(auth: SessionOrchestrator) -> None:
    user_id = uuid4()
    expired = create_access_token(
        user_id,
        SECRET,
        timedelta(hours=1),
        now=datetime.now(timezone.utc) - timedelta(hours=2),
    )
    foreign = create_access_token(user_id, "someone-elses-secret", timedelta(hours=1))

    with pytest.raises(Unauthorized):
        auth.authorize(bearer(expired))
    with pytest.raises(Unauthorized):
        auth.authorize(bearer(foreign))


def test_refresh_token_is_not_an_access_token(auth: SessionOrchestrator) -> None:
    auth.register("a@example.com", "pw123")
    result = auth.login("a@example.com", "pw123")

    with pytest.raises(Unauthorized):
        auth.authorize(bearer(result.refresh_token))


def test_authorize_ownership(auth: SessionOrchestrator) -> None:
    owner = uuid4()

    auth.authorize_ownership(owner, owner)
    with pytest.raises(Forbidden):
        auth.authorize_ownership(uuid4(), owner)


def test_authorize_api_key(auth: SessionOrchestrator) -> None:
    auth.authorize_api_key("ApiKey polka-key", "polka-key")

    with pytest.raises(Unauthorized):
        auth.authorize_api_key("ApiKey wrong", "polka-key")
    with pytest.raises(Unauthorized):
        auth.authorize_api_key(None, "polka-key")
    with pytest.raises(Unauthorized):
        auth.authorize_api_key("ApiKey anything", "")


def test_update_credentials(auth: SessionOrchestrator) -> None:
    profile = auth.register("a@example.com", "pw123")

    updated = auth.update_credentials(profile.id, "new@example.com", "newpass")

    assert updated.id == profile.id
    assert updated.email == "new@example.com"
    with pytest.raises(InvalidCredentials):
        auth.login("a@example.com", "pw123")
    assert auth.login("new@example.com", "newpass").user.id == profile.id


def test_update_credentials_rejects_taken_email(auth: SessionOrchestrator) -> None:
    first = auth.register("a@example.com", "pw123")
    auth.register("b@example.com", "pw456")

    with pytest.raises(EmailTaken):
        auth.update_credentials(first.id, "b@example.com", "pw123")


def test_minted_token_uses_process_secret(auth: SessionOrchestrator) -> None:
    auth.register("a@example.com", "pw123")
    result = auth.login("a@example.com", "pw123")

    assert validate_access_token(result.access_token, SECRET) == result.user.id
