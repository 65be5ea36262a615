from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from chirpy.api.deps import SettingsDep, StoreDep
from chirpy.core.errors import Forbidden, Internal, StorageError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/reset", response_class=PlainTextResponse)
def reset(store: StoreDep, app_settings: SettingsDep) -> str:
    if app_settings.PLATFORM != "dev":
        raise Forbidden()
    try:
        store.delete_users()
    except StorageError as e:
        raise Internal("Couldn't delete users") from e
    logger.warning("All users deleted via admin reset")
    return "Users deleted"
