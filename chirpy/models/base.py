from datetime import datetime, timezone
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

def utcnow():
    return datetime.now(timezone.utc)

def as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; they were written as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

class BaseTable(SQLModel):
    created_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=DateTime(timezone=True))
