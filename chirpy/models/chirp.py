from uuid import UUID, uuid4

from sqlmodel import Field

from chirpy.models.base import BaseTable


class Chirp(BaseTable, table=True):
    __tablename__: str = "chirps"  # type: ignore[assignment]

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    body: str = Field(nullable=False, max_length=140)
    user_id: UUID = Field(nullable=False, foreign_key="users.id", ondelete="CASCADE", index=True)
