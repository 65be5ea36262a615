from __future__ import annotations

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from chirpy.core.errors import (
    BadRequest,
    ChirpyError,
    EmailTaken,
    Forbidden,
    Internal,
    InvalidChirp,
    InvalidCredentials,
    NotFound,
    Unauthorized,
)

logger = logging.getLogger(__name__)

STATUS_CODES: dict[type[ChirpyError], int] = {
    InvalidCredentials: status.HTTP_401_UNAUTHORIZED,
    Unauthorized: status.HTTP_401_UNAUTHORIZED,
    Forbidden: status.HTTP_403_FORBIDDEN,
    BadRequest: status.HTTP_400_BAD_REQUEST,
    InvalidChirp: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    EmailTaken: status.HTTP_409_CONFLICT,
    Internal: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_code_for(exc: ChirpyError) -> int:
    for kind in type(exc).__mro__:
        if kind in STATUS_CODES:
            return STATUS_CODES[kind]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def chirpy_error_handler(request: Request, exc: ChirpyError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        # message only; never the request body or headers
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)

    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content={"error": exc.message}, headers=headers)
