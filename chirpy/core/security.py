from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

from jose import JWTError, jwt
from jose.exceptions import JWTClaimsError
from passlib.context import CryptContext

from chirpy.core.config import settings
from chirpy.core.errors import (
    BadSignature,
    CredentialMismatch,
    HashingFailure,
    MalformedToken,
    MissingToken,
    TokenExpired,
)

TOKEN_ISSUER = "chirpy"

# NOTE: bcrypt backend has compatibility issues in this runtime.
# pbkdf2_sha256 is stable and supported directly by passlib.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hash plain password using passlib context.

    Every call draws a fresh salt, so hashing the same password twice
    gives two different strings that both verify.
    """
    try:
        return pwd_context.hash(password)
    except (TypeError, ValueError) as e:
        raise HashingFailure() from e


def verify_password(password: str, password_hash: str) -> None:
    """
    Verify plain password against stored hash.

    Raises CredentialMismatch on mismatch or on a hash passlib can't read.
    """
    if not password_hash:
        raise CredentialMismatch()
    try:
        matched = pwd_context.verify(password, password_hash)
    except (TypeError, ValueError) as e:
        raise CredentialMismatch() from e
    if not matched:
        raise CredentialMismatch()


def _timestamp(value: datetime | None) -> int:
    if value is None:
        value = datetime.now(timezone.utc)
    elif value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())


def create_access_token(
    subject_id: UUID | str,
    signing_secret: str,
    ttl: timedelta,
    *,
    now: datetime | None = None,
    algorithm: str | None = None,
) -> str:
    """
    Create JWT access token.
    """
    issued_at = _timestamp(now)
    payload: dict[str, Any] = {
        "iss": TOKEN_ISSUER,
        "sub": str(subject_id),
        "iat": issued_at,
        "exp": issued_at + int(ttl.total_seconds()),
    }
    return jwt.encode(payload, signing_secret, algorithm=algorithm or settings.JWT_ALG)


def validate_access_token(
    token: str,
    signing_secret: str,
    *,
    now: datetime | None = None,
    algorithm: str | None = None,
) -> UUID:
    """
    Decode and validate JWT access token.
    Returns the subject id if valid.

    Raises MalformedToken, BadSignature or TokenExpired.
    """
    if not token:
        raise MalformedToken()

    try:
        jwt.get_unverified_claims(token)
    except JWTError as e:
        raise MalformedToken() from e

    # jose verifies the signature before looking at any claim; expiry is
    # checked below against the caller's clock
    try:
        payload = jwt.decode(
            token,
            signing_secret,
            algorithms=[algorithm or settings.JWT_ALG],
            issuer=TOKEN_ISSUER,
            options={"verify_exp": False},
        )
    except JWTClaimsError as e:
        raise MalformedToken() from e
    except JWTError as e:
        raise BadSignature() from e

    exp = payload.get("exp")
    if not isinstance(exp, int):
        raise MalformedToken("Token expiry is missing")
    if _timestamp(now) >= exp:
        raise TokenExpired()

    try:
        return UUID(str(payload["sub"]))
    except (KeyError, ValueError) as e:
        raise MalformedToken("Token subject is missing") from e


def _get_authorization_value(header_value: str | None, scheme: str) -> str:
    if not header_value:
        raise MissingToken()
    parts = header_value.split()
    if len(parts) != 2 or parts[0].lower() != scheme.lower():
        raise MissingToken(f"Authorization header must look like '{scheme} <value>'")
    return parts[1]


def get_bearer_token(header_value: str | None) -> str:
    return _get_authorization_value(header_value, "Bearer")


def get_api_key(header_value: str | None) -> str:
    return _get_authorization_value(header_value, "ApiKey")
