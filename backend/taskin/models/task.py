import enum
import uuid
from datetime import datetime

from sqlmodel import Field

from taskin.models.base import NAIVE_DATETIME, TrackedModel


class TaskStatus(str, enum.Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class Task(TrackedModel, table=True):
    """
    Task model - a unit of work inside a project.

    A task cannot exist without its project: deleting the project
    removes its tasks, and deleting a task removes its pomodoros.
    """

    __tablename__ = "tasks"

    description: str = Field(max_length=500)
    project_id: uuid.UUID = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    status: TaskStatus = Field(default=TaskStatus.TODO)
    deadline: datetime | None = Field(default=None, sa_type=NAIVE_DATETIME)

    def is_overdue(self, now: datetime) -> bool:
        return self.deadline is not None and self.deadline < now and self.status != TaskStatus.DONE
