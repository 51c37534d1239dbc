import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

# Timestamps are stored as naive UTC on every backend
NAIVE_DATETIME = DateTime(timezone=False)


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TrackedModel(SQLModel):
    """
    Shared identity and lifecycle timestamps.

    updated_at stays None until the first modification.
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=NAIVE_DATETIME)
    updated_at: datetime | None = Field(default=None, sa_type=NAIVE_DATETIME)

    def mark_modified(self) -> None:
        self.updated_at = utcnow()
