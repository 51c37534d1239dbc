import uuid
from datetime import datetime

from sqlmodel import Field

from taskin.models.base import NAIVE_DATETIME, TrackedModel


class Pomodoro(TrackedModel, table=True):
    """Pomodoro model - a timed work session spent on a task."""

    __tablename__ = "pomodoros"

    task_id: uuid.UUID = Field(foreign_key="tasks.id", index=True, ondelete="CASCADE")
    start_time: datetime = Field(sa_type=NAIVE_DATETIME)
    duration_in_minutes: int = Field(default=25)
