import uuid
from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from taskin.models import TaskStatus, utcnow
from taskin.schemas.common import TaskinModel, UtcDateTime
from taskin.schemas.pomodoro import PomodoroRead


class TaskCreate(TaskinModel):
    """Schema for creating a new task."""
    description: str = Field(min_length=1, max_length=500)
    project_id: uuid.UUID
    status: TaskStatus = TaskStatus.TODO
    deadline: UtcDateTime | None = None

    model_config = {"str_strip_whitespace": True}

    @field_validator("deadline")
    @classmethod
    def deadline_in_future(cls, value: datetime | None) -> datetime | None:
        if value is not None and value <= utcnow():
            raise ValueError("deadline must be in the future")
        return value


class TaskUpdate(TaskinModel):
    """Schema for updating a task. Status and deadline are kept when omitted."""
    description: str = Field(min_length=1, max_length=500)
    status: TaskStatus | None = None
    deadline: UtcDateTime | None = None

    model_config = {"str_strip_whitespace": True}


class TaskStatusUpdate(TaskinModel):
    status: TaskStatus


class TaskBulkStatusUpdate(TaskinModel):
    task_ids: list[uuid.UUID] = Field(min_length=1)
    status: TaskStatus


class TaskBulkStatusResult(TaskinModel):
    updated: int


class TaskDuplicate(TaskinModel):
    """Optional description for the copy; defaults to 'Copy of <original>'."""
    description: str | None = Field(default=None, min_length=1, max_length=500)


class TaskRead(TaskinModel):
    """Schema for reading a task."""
    id: uuid.UUID
    description: str
    project_id: uuid.UUID
    status: TaskStatus
    deadline: datetime | None
    created_at: datetime
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class TaskDetails(TaskRead):
    """Single task with its pomodoros."""
    pomodoros: list[PomodoroRead] = []


class TaskStats(TaskinModel):
    total: int
    todo: int
    in_progress: int
    done: int
    overdue: int


class TaskSearchFilters(TaskinModel):
    status: TaskStatus | None = None
    project_id: uuid.UUID | None = None
    is_completed: bool | None = None
    is_overdue: bool | None = None


class TaskSearch(TaskinModel):
    """
    Search body for tasks.

    ``query`` matches the description case-insensitively. ``sort_by`` accepts
    description (or title), status, deadline (or dueDate), createdAt and
    updatedAt; unknown keys sort by creation time.
    """
    query: str | None = Field(default=None, max_length=200)
    filters: TaskSearchFilters = Field(default_factory=TaskSearchFilters)
    sort_by: str = "createdAt"
    sort_direction: Literal["asc", "desc"] = "desc"
    page: int = Field(default=1, ge=1)
    size: int = Field(default=25, ge=1)

    model_config = {"str_strip_whitespace": True}

    @field_validator("sort_direction", mode="before")
    @classmethod
    def lowercase_direction(cls, value):
        return value.lower() if isinstance(value, str) else value
