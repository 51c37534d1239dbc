"""
Task routes for the Taskin API.
"""

import uuid

from fastapi import APIRouter, Depends, Query, Request, Response, status

from taskin.deps import get_mediator
from taskin.handlers.pomodoros import GetPomodorosByTaskIdQuery
from taskin.handlers.tasks import (
    BulkUpdateTaskStatusCommand,
    CreateTaskCommand,
    DeleteTaskCommand,
    DuplicateTaskCommand,
    GetTaskByIdQuery,
    GetTaskStatsQuery,
    SearchTasksQuery,
    ToggleTaskCompletionCommand,
    UpdateTaskCommand,
    UpdateTaskStatusCommand,
)
from taskin.mediator import Mediator
from taskin.schemas import (
    ActionResponse,
    Page,
    PomodoroRead,
    TaskBulkStatusResult,
    TaskBulkStatusUpdate,
    TaskCreate,
    TaskDetails,
    TaskDuplicate,
    TaskRead,
    TaskSearch,
    TaskStats,
    TaskStatusUpdate,
    TaskUpdate,
)

router = APIRouter()


@router.get("/", response_model=Page[TaskRead])
async def list_tasks(
    page: int = Query(default=1, ge=1),
    size: int = Query(default=25, ge=1),
    project_id: uuid.UUID | None = Query(default=None, alias="projectId"),
    mediator: Mediator = Depends(get_mediator),
):
    """List tasks newest first, optionally for a single project."""
    query = SearchTasksQuery(page=page, size=size, project_id=project_id)
    return (await mediator.send(query)).unwrap()


@router.post("/search", response_model=Page[TaskRead])
async def search_tasks(search_in: TaskSearch, mediator: Mediator = Depends(get_mediator)):
    """Search tasks by description with optional filters, sorting and paging."""
    filters = search_in.filters
    query = SearchTasksQuery(
        query=search_in.query or None,
        status=filters.status,
        project_id=filters.project_id,
        is_completed=filters.is_completed,
        is_overdue=filters.is_overdue,
        sort_by=search_in.sort_by,
        sort_direction=search_in.sort_direction,
        page=search_in.page,
        size=search_in.size,
    )
    return (await mediator.send(query)).unwrap()


@router.get("/stats", response_model=TaskStats)
async def task_stats(
    project_id: uuid.UUID | None = Query(default=None, alias="projectId"),
    mediator: Mediator = Depends(get_mediator),
):
    """Count tasks by status, plus overdue ones."""
    return (await mediator.send(GetTaskStatsQuery(project_id=project_id))).unwrap()


@router.post("/bulk-update-status", response_model=TaskBulkStatusResult)
async def bulk_update_status(
    update_in: TaskBulkStatusUpdate,
    mediator: Mediator = Depends(get_mediator),
):
    """Set one status on many tasks at once."""
    command = BulkUpdateTaskStatusCommand(task_ids=tuple(update_in.task_ids), status=update_in.status)
    updated = (await mediator.send(command)).unwrap()
    return TaskBulkStatusResult(updated=updated)


@router.get("/{task_id}", response_model=TaskDetails)
async def get_task(task_id: uuid.UUID, mediator: Mediator = Depends(get_mediator)):
    """Get a task with its pomodoros."""
    return (await mediator.send(GetTaskByIdQuery(id=task_id))).unwrap()


@router.get("/{task_id}/pomodoros", response_model=list[PomodoroRead])
async def list_task_pomodoros(task_id: uuid.UUID, mediator: Mediator = Depends(get_mediator)):
    return (await mediator.send(GetPomodorosByTaskIdQuery(task_id=task_id))).unwrap()


@router.post("/", response_model=ActionResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_in: TaskCreate,
    request: Request,
    response: Response,
    mediator: Mediator = Depends(get_mediator),
):
    """Create a new task in a project."""
    task_id = (await mediator.send(CreateTaskCommand(**task_in.model_dump()))).unwrap()
    response.headers["Location"] = str(request.url_for("get_task", task_id=task_id))
    return ActionResponse(id=task_id, message="Task created successfully")


@router.put("/{task_id}", response_model=ActionResponse)
async def update_task(
    task_id: uuid.UUID,
    task_in: TaskUpdate,
    mediator: Mediator = Depends(get_mediator),
):
    """Update a task. Status and deadline are kept when omitted."""
    (await mediator.send(UpdateTaskCommand(id=task_id, **task_in.model_dump()))).unwrap()
    return ActionResponse(id=task_id, message="Task updated successfully")


@router.patch("/{task_id}/status", response_model=ActionResponse)
async def update_task_status(
    task_id: uuid.UUID,
    status_in: TaskStatusUpdate,
    mediator: Mediator = Depends(get_mediator),
):
    """Move a task to another status."""
    (await mediator.send(UpdateTaskStatusCommand(id=task_id, status=status_in.status))).unwrap()
    return ActionResponse(id=task_id, message="Task status updated successfully")


@router.post("/{task_id}/toggle-completion", response_model=TaskRead)
async def toggle_task_completion(task_id: uuid.UUID, mediator: Mediator = Depends(get_mediator)):
    """Mark a task done, or reopen a done task as todo."""
    return (await mediator.send(ToggleTaskCompletionCommand(id=task_id))).unwrap()


@router.post("/{task_id}/duplicate", response_model=ActionResponse, status_code=status.HTTP_201_CREATED)
async def duplicate_task(
    task_id: uuid.UUID,
    request: Request,
    response: Response,
    duplicate_in: TaskDuplicate | None = None,
    mediator: Mediator = Depends(get_mediator),
):
    """Copy a task into the same project as a new todo."""
    description = duplicate_in.description if duplicate_in else None
    copy_id = (await mediator.send(DuplicateTaskCommand(id=task_id, description=description))).unwrap()
    response.headers["Location"] = str(request.url_for("get_task", task_id=copy_id))
    return ActionResponse(id=copy_id, message="Task duplicated successfully")


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: uuid.UUID, mediator: Mediator = Depends(get_mediator)) -> None:
    """Delete a task and its pomodoros."""
    (await mediator.send(DeleteTaskCommand(id=task_id))).unwrap()
