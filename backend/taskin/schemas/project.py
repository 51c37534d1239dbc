import uuid
from datetime import datetime

from pydantic import Field, field_validator

from taskin.models import ProjectStatus, TaskStatus
from taskin.schemas.common import TaskinModel, UtcDateTime, check_absolute_url

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class ProjectCreate(TaskinModel):
    """Schema for creating a new project."""
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    due_date: UtcDateTime | None = None
    image_url: str | None = Field(default=None, max_length=500)
    background_color: str | None = Field(default=None, pattern=HEX_COLOR)

    model_config = {"str_strip_whitespace": True}

    @field_validator("image_url")
    @classmethod
    def image_url_is_absolute(cls, value: str | None) -> str | None:
        return check_absolute_url(value)


class ProjectUpdate(ProjectCreate):
    """Schema for replacing a project. Status is kept when omitted."""
    status: ProjectStatus | None = None


class ProjectRead(TaskinModel):
    """Schema for reading a project."""
    id: uuid.UUID
    name: str
    description: str | None
    status: ProjectStatus
    due_date: datetime | None
    image_url: str | None
    background_color: str | None
    created_at: datetime
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class ProjectListItem(ProjectRead):
    """Project row in a list, with task progress."""
    progress: int = 0  # Percentage of done tasks
    total_tasks: int = 0
    completed_tasks: int = 0


class TaskSummary(TaskinModel):
    id: uuid.UUID
    description: str
    status: TaskStatus

    model_config = {"from_attributes": True}


class ProjectDetails(ProjectListItem):
    """Single project with a summary of its tasks."""
    tasks: list[TaskSummary] = []


class ProjectStats(TaskinModel):
    total: int
    active: int
    completed: int
    on_hold: int
