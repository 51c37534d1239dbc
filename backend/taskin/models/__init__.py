from taskin.models.base import TrackedModel, utcnow
from taskin.models.project import Project, ProjectStatus
from taskin.models.task import Task, TaskStatus
from taskin.models.pomodoro import Pomodoro

__all__ = [
    "TrackedModel",
    "utcnow",
    "Project",
    "ProjectStatus",
    "Task",
    "TaskStatus",
    "Pomodoro",
]
