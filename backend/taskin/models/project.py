import enum
from datetime import datetime

from sqlmodel import Field

from taskin.models.base import NAIVE_DATETIME, TrackedModel


class ProjectStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"


class Project(TrackedModel, table=True):
    """Project model - groups tasks together."""

    __tablename__ = "projects"

    name: str = Field(index=True, max_length=200)
    description: str | None = Field(default=None)
    status: ProjectStatus = Field(default=ProjectStatus.ACTIVE)
    due_date: datetime | None = Field(default=None, sa_type=NAIVE_DATETIME)
    image_url: str | None = Field(default=None, max_length=500)
    background_color: str | None = Field(default=None, max_length=50)
