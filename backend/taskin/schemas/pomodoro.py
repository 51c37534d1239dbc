import uuid
from datetime import datetime

from pydantic import Field

from taskin.schemas.common import TaskinModel, UtcDateTime

MAX_DURATION_MINUTES = 480  # 8 hours


class PomodoroCreate(TaskinModel):
    """Schema for recording a pomodoro."""
    task_id: uuid.UUID
    start_time: UtcDateTime
    duration_in_minutes: int = Field(default=25, gt=0, le=MAX_DURATION_MINUTES)


class PomodoroUpdate(TaskinModel):
    """Schema for updating a pomodoro. Omitted fields are kept."""
    start_time: UtcDateTime | None = None
    duration_in_minutes: int | None = Field(default=None, gt=0, le=MAX_DURATION_MINUTES)


class PomodoroRead(TaskinModel):
    id: uuid.UUID
    task_id: uuid.UUID
    start_time: datetime
    duration_in_minutes: int
    created_at: datetime
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class PomodoroStats(TaskinModel):
    total: int
    total_minutes: int
    average_duration: float
