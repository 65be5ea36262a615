"""
Failure kinds raised by the auth core and the services built on it.

The lower group is raised by the primitives (hasher, token codec, refresh
token manager, store). The orchestrator catches those and re-raises one of
the boundary kinds, which are the only ones the HTTP layer maps.
"""

from __future__ import annotations


class ChirpyError(Exception):
    message = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class CredentialMismatch(ChirpyError):
    message = "Password does not match"


class HashingFailure(ChirpyError):
    message = "Couldn't hash password"


class MalformedToken(ChirpyError):
    message = "Token is malformed"


class BadSignature(ChirpyError):
    message = "Token signature is invalid"


class TokenExpired(ChirpyError):
    message = "Token has expired"


class MissingToken(ChirpyError):
    message = "No authorization token provided"


class RefreshTokenNotFound(ChirpyError):
    message = "Refresh token not found"


class RefreshTokenExpired(ChirpyError):
    message = "Refresh token has expired"


class RefreshTokenRevoked(ChirpyError):
    message = "Refresh token has been revoked"


class StorageError(ChirpyError):
    message = "Storage operation failed"


# Boundary kinds


class InvalidCredentials(ChirpyError):
    message = "Incorrect email or password"


class Unauthorized(ChirpyError):
    message = "Invalid authentication credentials"


class Forbidden(ChirpyError):
    message = "Access not allowed"


class BadRequest(ChirpyError):
    message = "Bad request"


class NotFound(ChirpyError):
    message = "Not found"


class EmailTaken(ChirpyError):
    message = "User with this email already exists"


class InvalidChirp(ChirpyError):
    message = "Chirp is invalid"


class Internal(ChirpyError):
    message = "Internal error"
