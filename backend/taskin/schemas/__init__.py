from taskin.schemas.common import ActionResponse, Page, TaskinModel
from taskin.schemas.project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectRead,
    ProjectListItem,
    ProjectDetails,
    ProjectStats,
    TaskSummary,
)
from taskin.schemas.pomodoro import PomodoroCreate, PomodoroUpdate, PomodoroRead, PomodoroStats
from taskin.schemas.task import (
    TaskCreate,
    TaskUpdate,
    TaskStatusUpdate,
    TaskBulkStatusUpdate,
    TaskBulkStatusResult,
    TaskDuplicate,
    TaskRead,
    TaskDetails,
    TaskSearch,
    TaskSearchFilters,
    TaskStats,
)

__all__ = [
    "ActionResponse",
    "Page",
    "TaskinModel",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectRead",
    "ProjectListItem",
    "ProjectDetails",
    "ProjectStats",
    "TaskSummary",
    "PomodoroCreate",
    "PomodoroUpdate",
    "PomodoroRead",
    "PomodoroStats",
    "TaskCreate",
    "TaskUpdate",
    "TaskStatusUpdate",
    "TaskBulkStatusUpdate",
    "TaskBulkStatusResult",
    "TaskDuplicate",
    "TaskRead",
    "TaskDetails",
    "TaskSearch",
    "TaskSearchFilters",
    "TaskStats",
]
