from __future__ import annotations

from fastapi import APIRouter, Response, status

from chirpy.api.deps import AuthDep, AuthorizationHeader
from chirpy.schemas.user import LoginResponse, RefreshResponse, UserLogin, UserRead

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login_user(payload: UserLogin, auth: AuthDep) -> LoginResponse:
    result = auth.login(payload.email, payload.password, payload.expires_in_seconds)
    return LoginResponse.compose(
        UserRead.from_profile(result.user),
        token=result.access_token,
        refresh_token=result.refresh_token,
    )


@router.post("/refresh", response_model=RefreshResponse)
def refresh_access_token(auth: AuthDep, authorization: AuthorizationHeader = None) -> RefreshResponse:
    return RefreshResponse(token=auth.refresh(authorization))


@router.post("/revoke", status_code=status.HTTP_204_NO_CONTENT)
def revoke_refresh_token(auth: AuthDep, authorization: AuthorizationHeader = None) -> Response:
    auth.revoke(authorization)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
