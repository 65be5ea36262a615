from uuid import UUID

from pydantic import BaseModel


class PolkaEventData(BaseModel):
    user_id: UUID


class PolkaEvent(BaseModel):
    event: str
    data: PolkaEventData
