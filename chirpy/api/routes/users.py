from __future__ import annotations

from fastapi import APIRouter, status

from chirpy.api.deps import AuthDep, CurrentUserIdDep
from chirpy.schemas.user import UserCreate, UserRead, UserUpdate

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register_user(payload: UserCreate, auth: AuthDep) -> UserRead:
    return UserRead.from_profile(auth.register(payload.email, payload.password))


@router.put("", response_model=UserRead)
def update_user(payload: UserUpdate, auth: AuthDep, user_id: CurrentUserIdDep) -> UserRead:
    return UserRead.from_profile(auth.update_credentials(user_id, payload.email, payload.password))
