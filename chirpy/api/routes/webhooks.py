from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from chirpy.api.deps import AuthDep, AuthorizationHeader, SettingsDep, StoreDep
from chirpy.core.errors import BadRequest
from chirpy.schemas.webhook import PolkaEvent
from chirpy.services.memberships import apply_payment_event

router = APIRouter(prefix="/api/polka", tags=["webhooks"])


def require_polka_key(auth: AuthDep, app_settings: SettingsDep, authorization: AuthorizationHeader = None) -> None:
    auth.authorize_api_key(authorization, app_settings.POLKA_KEY)


# The body is read by hand so an unauthenticated caller gets 401, not 422.
@router.post("/webhooks", status_code=status.HTTP_204_NO_CONTENT)
async def polka_webhook(
    request: Request,
    store: StoreDep,
    _api_key: Annotated[None, Depends(require_polka_key)],
) -> Response:
    try:
        payload = PolkaEvent.model_validate_json(await request.body())
    except ValidationError as e:
        raise BadRequest("Couldn't decode parameters") from e

    await run_in_threadpool(apply_payment_event, store, payload.event, payload.data.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
