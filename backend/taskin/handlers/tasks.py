"""
Task commands and queries.
"""

import uuid
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import and_

from taskin.errors import Error, Result
from taskin.logging_config import get_logger
from taskin.mediator import HandlerContext, handles
from taskin.models import Pomodoro, Task, TaskStatus, utcnow
from taskin.schemas import Page, PomodoroRead, TaskDetails, TaskRead, TaskStats

logger = get_logger(__name__)

SORT_COLUMNS = {
    "description": Task.description,
    "title": Task.description,
    "status": Task.status,
    "deadline": Task.deadline,
    "duedate": Task.deadline,
    "createdat": Task.created_at,
    "created": Task.created_at,
    "updatedat": Task.updated_at,
}


@dataclass(frozen=True)
class CreateTaskCommand:
    description: str
    project_id: uuid.UUID
    status: TaskStatus = TaskStatus.TODO
    deadline: Optional[datetime] = None


@dataclass(frozen=True)
class UpdateTaskCommand:
    id: uuid.UUID
    description: str
    status: Optional[TaskStatus] = None
    deadline: Optional[datetime] = None


@dataclass(frozen=True)
class UpdateTaskStatusCommand:
    id: uuid.UUID
    status: TaskStatus


@dataclass(frozen=True)
class BulkUpdateTaskStatusCommand:
    task_ids: tuple[uuid.UUID, ...]
    status: TaskStatus


@dataclass(frozen=True)
class DuplicateTaskCommand:
    id: uuid.UUID
    description: Optional[str] = None


@dataclass(frozen=True)
class DeleteTaskCommand:
    id: uuid.UUID


@dataclass(frozen=True)
class GetTaskByIdQuery:
    id: uuid.UUID


@dataclass(frozen=True)
class ToggleTaskCompletionCommand:
    id: uuid.UUID


@dataclass(frozen=True)
class SearchTasksQuery:
    query: Optional[str] = None
    status: Optional[TaskStatus] = None
    project_id: Optional[uuid.UUID] = None
    is_completed: Optional[bool] = None
    is_overdue: Optional[bool] = None
    sort_by: str = "createdAt"
    sort_direction: str = "desc"
    page: int = 1
    size: int = 25


@dataclass(frozen=True)
class GetTasksByProjectIdQuery:
    project_id: uuid.UUID


@dataclass(frozen=True)
class GetTaskStatsQuery:
    project_id: Optional[uuid.UUID] = None


@handles(CreateTaskCommand)
async def create_task(command: CreateTaskCommand, ctx: HandlerContext) -> Result[uuid.UUID]:
    task = Task(
        description=command.description,
        project_id=command.project_id,
        status=command.status,
        deadline=command.deadline,
    )
    ctx.db.tasks.add(task)
    await ctx.uow.save_changes()

    ctx.metrics.record_task_created()
    logger.info(f"Created task: id={task.id} project={task.project_id}")
    return Result.success(task.id)


@handles(GetTaskByIdQuery)
async def get_task(query: GetTaskByIdQuery, ctx: HandlerContext) -> Result[TaskDetails]:
    task = await ctx.db.tasks.find(query.id)
    if task is None:
        return Result.failure(Error.not_found("Task", query.id))

    pomodoros = await ctx.db.pomodoros.list(Pomodoro.task_id == task.id)
    details = TaskDetails.model_validate(task)
    details.pomodoros = [PomodoroRead.model_validate(p) for p in pomodoros]
    return Result.success(details)


def search_criteria(query: SearchTasksQuery, now: datetime) -> list:
    criteria = []
    if query.query:
        criteria.append(Task.description.icontains(query.query, autoescape=True))
    if query.status is not None:
        criteria.append(Task.status == query.status)
    if query.project_id is not None:
        criteria.append(Task.project_id == query.project_id)
    if query.is_completed is not None:
        done = Task.status == TaskStatus.DONE
        criteria.append(done if query.is_completed else ~done)
    if query.is_overdue is not None:
        overdue = and_(Task.deadline.is_not(None), Task.deadline < now, Task.status != TaskStatus.DONE)
        criteria.append(overdue if query.is_overdue else ~overdue)
    return criteria


def task_ordering(sort_by: Optional[str], direction: Optional[str]) -> list:
    """Lenient sort key; unknown keys fall back to creation time. Ties break on id."""
    key = (sort_by or "").strip().lower().replace("_", "").replace("-", "")
    column = SORT_COLUMNS.get(key, Task.created_at)
    if (direction or "").lower() == "asc":
        return [column.asc(), Task.id.asc()]
    return [column.desc(), Task.id.desc()]


@handles(SearchTasksQuery)
async def search_tasks(query: SearchTasksQuery, ctx: HandlerContext) -> Result[Page[TaskRead]]:
    """Filter, sort and page tasks. Newest first unless asked otherwise."""
    criteria = search_criteria(query, utcnow())

    total = await ctx.db.tasks.count(*criteria)
    tasks = await ctx.db.tasks.list(
        *criteria,
        order_by=task_ordering(query.sort_by, query.sort_direction),
        offset=(query.page - 1) * query.size,
        limit=query.size,
    )
    items = [TaskRead.model_validate(task) for task in tasks]
    return Result.success(Page[TaskRead](data=items, total=total, page=query.page, size=query.size))


@handles(GetTasksByProjectIdQuery)
async def get_tasks_by_project(query: GetTasksByProjectIdQuery, ctx: HandlerContext) -> Result[list[TaskRead]]:
    tasks = await ctx.db.tasks.list(Task.project_id == query.project_id)
    return Result.success([TaskRead.model_validate(task) for task in tasks])


@handles(UpdateTaskCommand)
async def update_task(command: UpdateTaskCommand, ctx: HandlerContext) -> Result[uuid.UUID]:
    task = await ctx.db.tasks.find(command.id)
    if task is None:
        return Result.failure(Error.not_found("Task", command.id))

    completed = command.status == TaskStatus.DONE and task.status != TaskStatus.DONE

    task.description = command.description
    if command.status is not None:
        task.status = command.status
    if command.deadline is not None:
        task.deadline = command.deadline
    task.mark_modified()

    await ctx.uow.save_changes()
    if completed:
        ctx.metrics.record_task_completed()
    logger.info(f"Updated task {task.id}")
    return Result.success(task.id)


@handles(UpdateTaskStatusCommand)
async def update_task_status(command: UpdateTaskStatusCommand, ctx: HandlerContext) -> Result[uuid.UUID]:
    task = await ctx.db.tasks.find(command.id)
    if task is None:
        return Result.failure(Error.not_found("Task", command.id))

    completed = command.status == TaskStatus.DONE and task.status != TaskStatus.DONE
    old_status = task.status
    task.status = command.status
    task.mark_modified()

    await ctx.uow.save_changes()
    if completed:
        ctx.metrics.record_task_completed()
    logger.info(f"Task {task.id} status: {old_status.value} -> {task.status.value}")
    return Result.success(task.id)


@handles(ToggleTaskCompletionCommand)
async def toggle_task_completion(command: ToggleTaskCompletionCommand, ctx: HandlerContext) -> Result[TaskRead]:
    """Mark a task done, or reopen it as todo when it already is."""
    task = await ctx.db.tasks.find(command.id)
    if task is None:
        return Result.failure(Error.not_found("Task", command.id))

    completed = task.status != TaskStatus.DONE
    task.status = TaskStatus.DONE if completed else TaskStatus.TODO
    task.mark_modified()

    await ctx.uow.save_changes()
    if completed:
        ctx.metrics.record_task_completed()
    logger.info(f"Toggled task {task.id} to {task.status.value}")
    return Result.success(TaskRead.model_validate(task))


@handles(BulkUpdateTaskStatusCommand)
async def bulk_update_task_status(command: BulkUpdateTaskStatusCommand, ctx: HandlerContext) -> Result[int]:
    """Set one status on many tasks. Unknown ids are skipped."""
    tasks = await ctx.db.tasks.list(Task.id.in_(command.task_ids))

    completed = 0
    for task in tasks:
        if command.status == TaskStatus.DONE and task.status != TaskStatus.DONE:
            completed += 1
        task.status = command.status
        task.mark_modified()

    await ctx.uow.save_changes()
    if completed:
        ctx.metrics.record_task_completed(completed)

    skipped = len(set(command.task_ids)) - len(tasks)
    if skipped:
        logger.warning(f"Bulk status update skipped {skipped} unknown task id(s)")
    logger.info(f"Bulk status update: {len(tasks)} task(s) -> {command.status.value}")
    return Result.success(len(tasks))


@handles(DuplicateTaskCommand)
async def duplicate_task(command: DuplicateTaskCommand, ctx: HandlerContext) -> Result[uuid.UUID]:
    original = await ctx.db.tasks.find(command.id)
    if original is None:
        return Result.failure(Error.not_found("Task", command.id))

    copy = Task(
        description=command.description or f"Copy of {original.description}"[:500],
        project_id=original.project_id,
        status=TaskStatus.TODO,
        deadline=original.deadline,
    )
    ctx.db.tasks.add(copy)
    await ctx.uow.save_changes()

    ctx.metrics.record_task_created()
    logger.info(f"Duplicated task {original.id} as {copy.id}")
    return Result.success(copy.id)


@handles(DeleteTaskCommand)
async def delete_task(command: DeleteTaskCommand, ctx: HandlerContext) -> Result[uuid.UUID]:
    task = await ctx.db.tasks.find(command.id)
    if task is None:
        return Result.failure(Error.not_found("Task", command.id))

    pomodoros = await ctx.db.pomodoros.delete_where(Pomodoro.task_id == task.id)
    await ctx.db.tasks.remove(task)
    await ctx.uow.save_changes()

    ctx.metrics.record_task_deleted()
    logger.info(f"Deleted task {command.id} ({pomodoros} pomodoros)")
    return Result.success(command.id)


@handles(GetTaskStatsQuery)
async def get_task_stats(query: GetTaskStatsQuery, ctx: HandlerContext) -> Result[TaskStats]:
    criteria = []
    if query.project_id is not None:
        criteria.append(Task.project_id == query.project_id)
    tasks = await ctx.db.tasks.list(*criteria)

    now = utcnow()
    by_status = Counter(task.status for task in tasks)
    return Result.success(
        TaskStats(
            total=len(tasks),
            todo=by_status[TaskStatus.TODO],
            in_progress=by_status[TaskStatus.IN_PROGRESS],
            done=by_status[TaskStatus.DONE],
            overdue=sum(1 for task in tasks if task.is_overdue(now)),
        )
    )
