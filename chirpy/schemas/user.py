from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from chirpy.services.sessions import UserProfile

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserCreate(BaseModel):
    email: str = Field(min_length=5, max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=1, max_length=255)


class UserUpdate(UserCreate):
    pass


class UserLogin(BaseModel):
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=255)
    expires_in_seconds: int | None = None


class UserRead(BaseModel):
    id: UUID
    email: str
    is_chirpy_red: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_profile(cls, profile: UserProfile) -> UserRead:
        return cls(
            id=profile.id,
            email=profile.email,
            is_chirpy_red=profile.is_chirpy_red,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )


class LoginResponse(BaseModel):
    id: UUID
    email: str
    is_chirpy_red: bool
    created_at: datetime
    updated_at: datetime
    token: str
    refresh_token: str

    @classmethod
    def compose(cls, user: UserRead, token: str, refresh_token: str) -> LoginResponse:
        return cls(**user.model_dump(), token=token, refresh_token=refresh_token)


class RefreshResponse(BaseModel):
    token: str
