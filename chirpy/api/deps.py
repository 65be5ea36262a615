from __future__ import annotations

from datetime import timedelta
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header
from sqlmodel import Session

from chirpy.core.config import Settings, settings
from chirpy.db.session import get_session
from chirpy.db.store import SQLStore, Store
from chirpy.services.refresh_tokens import RefreshTokenManager
from chirpy.services.sessions import SessionOrchestrator

SessionDep = Annotated[Session, Depends(get_session)]
AuthorizationHeader = Annotated[str | None, Header()]


def get_settings() -> Settings:
    return settings


SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_store(session: SessionDep) -> Store:
    return SQLStore(session)


StoreDep = Annotated[Store, Depends(get_store)]


def get_auth(store: StoreDep, app_settings: SettingsDep) -> SessionOrchestrator:
    refresh_tokens = RefreshTokenManager(
        store,
        lifetime=timedelta(days=app_settings.REFRESH_TOKEN_DAYS),
    )
    return SessionOrchestrator(
        store,
        app_settings.require_secret(),
        refresh_tokens=refresh_tokens,
        access_token_ttl=timedelta(seconds=app_settings.ACCESS_TOKEN_SECONDS),
    )


AuthDep = Annotated[SessionOrchestrator, Depends(get_auth)]


def get_current_user_id(auth: AuthDep, authorization: AuthorizationHeader = None) -> UUID:
    return auth.authorize(authorization)


CurrentUserIdDep = Annotated[UUID, Depends(get_current_user_id)]
