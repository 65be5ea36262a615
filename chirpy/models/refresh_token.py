from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime
from sqlmodel import Field

from chirpy.models.base import BaseTable


class RefreshToken(BaseTable, table=True):
    __tablename__: str = "refresh_tokens"  # type: ignore[assignment]

    token: str = Field(primary_key=True, max_length=64)
    user_id: UUID = Field(nullable=False, foreign_key="users.id", ondelete="CASCADE", index=True)
    expires_at: datetime = Field(nullable=False, index=True, sa_type=DateTime(timezone=True))
    revoked_at: datetime | None = Field(default=None, index=True, sa_type=DateTime(timezone=True))
