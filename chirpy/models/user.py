from uuid import UUID, uuid4

from sqlmodel import Field

from chirpy.models.base import BaseTable


class User(BaseTable, table=True):
    __tablename__: str = "users" # type: ignore[assignment]

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(index=True, unique=True, nullable=False, max_length=255)
    hashed_password: str = Field(nullable=False, max_length=255)
    is_chirpy_red: bool = Field(default=False, nullable=False)
