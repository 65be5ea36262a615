from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta
from uuid import UUID

from chirpy.core.errors import RefreshTokenExpired, RefreshTokenNotFound, RefreshTokenRevoked
from chirpy.db.store import Store
from chirpy.models.base import as_utc, utcnow
from chirpy.models.refresh_token import RefreshToken

logger = logging.getLogger(__name__)

REFRESH_TOKEN_BYTES = 32
DEFAULT_LIFETIME = timedelta(days=60)


def generate_refresh_token() -> str:
    """
    256 bits from the OS CSPRNG, hex encoded (64 chars).
    """
    return secrets.token_hex(REFRESH_TOKEN_BYTES)


class RefreshTokenManager:
    def __init__(
        self,
        store: Store,
        *,
        lifetime: timedelta = DEFAULT_LIFETIME,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.lifetime = lifetime
        self.clock = clock

    def _now(self) -> datetime:
        return as_utc(self.clock())

    def issue(self, user_id: UUID) -> RefreshToken:
        return self.store.create_refresh_token(
            generate_refresh_token(),
            user_id,
            self._now() + self.lifetime,
        )

    def resolve(self, token: str) -> UUID:
        """
        Return the owner of a live refresh token.

        Raises RefreshTokenNotFound, RefreshTokenRevoked or RefreshTokenExpired,
        checked in that order.
        """
        refresh_token = self.store.get_refresh_token(token)
        if refresh_token is None:
            raise RefreshTokenNotFound()
        if refresh_token.revoked_at is not None:
            raise RefreshTokenRevoked()
        if self._now() >= as_utc(refresh_token.expires_at):
            raise RefreshTokenExpired()
        return refresh_token.user_id

    def revoke(self, token: str) -> None:
        # Revoking twice keeps the first revoked_at and succeeds.
        refresh_token = self.store.revoke_refresh_token(token, self._now())
        if refresh_token is None:
            raise RefreshTokenNotFound()
        logger.info("Refresh token revoked for user %s", refresh_token.user_id)
