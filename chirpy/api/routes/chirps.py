from __future__ import annotations

from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from chirpy.api.deps import AuthDep, CurrentUserIdDep, StoreDep
from chirpy.schemas.chirp import ChirpCreate, ChirpRead
from chirpy.services import chirps

router = APIRouter(prefix="/api/chirps", tags=["chirps"])


@router.post("", response_model=ChirpRead, status_code=status.HTTP_201_CREATED)
def create_chirp(payload: ChirpCreate, store: StoreDep, user_id: CurrentUserIdDep) -> ChirpRead:
    chirp = chirps.create_chirp(store, user_id, payload.body)
    return ChirpRead.model_validate(chirp)


@router.get("", response_model=list[ChirpRead])
def list_chirps(
    store: StoreDep,
    author_id: Annotated[UUID | None, Query()] = None,
    sort: Annotated[Literal["asc", "desc"], Query()] = "asc",
) -> list[ChirpRead]:
    return [ChirpRead.model_validate(chirp) for chirp in chirps.list_chirps(store, author_id, sort)]


@router.get("/{chirp_id}", response_model=ChirpRead)
def get_chirp(chirp_id: UUID, store: StoreDep) -> ChirpRead:
    return ChirpRead.model_validate(chirps.get_chirp(store, chirp_id))


@router.delete("/{chirp_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_chirp(chirp_id: UUID, store: StoreDep, auth: AuthDep, user_id: CurrentUserIdDep) -> Response:
    chirps.delete_chirp(store, auth, user_id, chirp_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
