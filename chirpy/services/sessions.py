"""
Session orchestration: login, refresh, revoke and the authorization checks
that gate every mutating endpoint.

Primitive failures (hashing, token decoding, refresh-token lookup, storage)
are caught here and re-raised as one of the boundary kinds from
``chirpy.core.errors``. Refresh-token failures all collapse into
``Unauthorized`` and unknown-email/wrong-password both become
``InvalidCredentials`` so callers can't tell the cases apart.
"""

from __future__ import annotations

import hmac
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

from chirpy.core.errors import (
    BadRequest,
    BadSignature,
    CredentialMismatch,
    EmailTaken,
    Forbidden,
    HashingFailure,
    Internal,
    InvalidCredentials,
    MalformedToken,
    MissingToken,
    NotFound,
    RefreshTokenExpired,
    RefreshTokenNotFound,
    RefreshTokenRevoked,
    StorageError,
    TokenExpired,
    Unauthorized,
)
from chirpy.core.security import (
    create_access_token,
    get_api_key,
    get_bearer_token,
    hash_password,
    validate_access_token,
    verify_password,
)
from chirpy.db.store import Store
from chirpy.models.user import User
from chirpy.services.refresh_tokens import RefreshTokenManager

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TTL = timedelta(hours=1)


@dataclass(frozen=True)
class UserProfile:
    id: UUID
    email: str
    is_chirpy_red: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> UserProfile:
        return cls(
            id=user.id,
            email=user.email,
            is_chirpy_red=user.is_chirpy_red,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


@dataclass(frozen=True)
class LoginResult:
    access_token: str
    refresh_token: str
    user: UserProfile


def access_token_ttl(expires_in_seconds: int | None, default: timedelta = ACCESS_TOKEN_TTL) -> timedelta:
    """
    Honor a client-requested lifetime only inside (0, default].
    """
    if expires_in_seconds is None:
        return default
    if 0 < expires_in_seconds <= default.total_seconds():
        return timedelta(seconds=expires_in_seconds)
    return default


@contextmanager
def _internal_failures() -> Iterator[None]:
    try:
        yield
    except (StorageError, HashingFailure) as e:
        raise Internal(e.message) from e


class SessionOrchestrator:
    def __init__(
        self,
        store: Store,
        signing_secret: str,
        *,
        refresh_tokens: RefreshTokenManager | None = None,
        access_token_ttl: timedelta = ACCESS_TOKEN_TTL,
    ) -> None:
        self.store = store
        self.signing_secret = signing_secret
        self.refresh_tokens = refresh_tokens or RefreshTokenManager(store)
        self.access_token_ttl = access_token_ttl

    def register(self, email: str, password: str) -> UserProfile:
        with _internal_failures():
            if self.store.find_user_by_email(email) is not None:
                raise EmailTaken()
            user = self.store.create_user(email, hash_password(password))
        logger.info("Registered user %s", user.id)
        return UserProfile.from_user(user)

    def login(self, email: str, password: str, expires_in_seconds: int | None = None) -> LoginResult:
        with _internal_failures():
            user = self.store.find_user_by_email(email)
        if user is None:
            logger.info("Login rejected")
            raise InvalidCredentials()
        try:
            verify_password(password, user.hashed_password)
        except CredentialMismatch:
            logger.info("Login rejected")
            raise InvalidCredentials() from None

        access_token = create_access_token(
            user.id,
            self.signing_secret,
            access_token_ttl(expires_in_seconds, self.access_token_ttl),
        )
        # A failed persist drops the access token above with the exception.
        with _internal_failures():
            refresh_token = self.refresh_tokens.issue(user.id)

        return LoginResult(
            access_token=access_token,
            refresh_token=refresh_token.token,
            user=UserProfile.from_user(user),
        )

    def refresh(self, bearer_header: str | None) -> str:
        try:
            token = get_bearer_token(bearer_header)
        except MissingToken as e:
            raise BadRequest("Couldn't find token") from e

        with _internal_failures():
            try:
                user_id = self.refresh_tokens.resolve(token)
            except (RefreshTokenNotFound, RefreshTokenRevoked, RefreshTokenExpired) as e:
                raise Unauthorized("Couldn't get user for refresh token") from e

        return create_access_token(user_id, self.signing_secret, self.access_token_ttl)

    def revoke(self, bearer_header: str | None) -> None:
        try:
            token = get_bearer_token(bearer_header)
        except MissingToken as e:
            raise BadRequest("No token provided") from e

        with _internal_failures():
            try:
                self.refresh_tokens.revoke(token)
            except RefreshTokenNotFound:
                # Nothing to revoke; answering differently would confirm
                # which tokens exist.
                logger.debug("Revoke requested for unknown refresh token")

    def authorize(self, bearer_header: str | None) -> UUID:
        try:
            token = get_bearer_token(bearer_header)
            return validate_access_token(token, self.signing_secret)
        except (MissingToken, MalformedToken, BadSignature, TokenExpired) as e:
            raise Unauthorized("Couldn't validate JWT") from e

    def authorize_ownership(self, subject_id: UUID, owner_id: UUID) -> None:
        if subject_id != owner_id:
            raise Forbidden()

    def authorize_api_key(self, header_value: str | None, expected_key: str) -> None:
        try:
            api_key = get_api_key(header_value)
        except MissingToken as e:
            raise Unauthorized("No api key provided") from e
        if not expected_key or not hmac.compare_digest(api_key.encode(), expected_key.encode()):
            raise Unauthorized("API key is invalid")

    def update_credentials(self, subject_id: UUID, email: str, password: str) -> UserProfile:
        with _internal_failures():
            existing = self.store.find_user_by_email(email)
            if existing is not None and existing.id != subject_id:
                raise EmailTaken()
            user = self.store.update_user_credentials(subject_id, email, hash_password(password))
        if user is None:
            raise NotFound("Couldn't find user")
        return UserProfile.from_user(user)
