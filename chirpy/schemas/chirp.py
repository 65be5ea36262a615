from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ChirpCreate(BaseModel):
    body: str = Field(min_length=1)


class ChirpRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    body: str
    user_id: UUID
    created_at: datetime
    updated_at: datetime
