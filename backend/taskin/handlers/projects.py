"""
Project commands and queries.
"""

import uuid
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import func, or_, select

from taskin.errors import Error, Result
from taskin.logging_config import get_logger
from taskin.mediator import HandlerContext, handles
from taskin.models import Pomodoro, Project, ProjectStatus, Task, TaskStatus
from taskin.schemas import Page, ProjectDetails, ProjectListItem, ProjectStats, TaskSummary

logger = get_logger(__name__)


# =============================================================================
# Requests
# =============================================================================

@dataclass(frozen=True)
class CreateProjectCommand:
    name: str
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    due_date: Optional[datetime] = None
    image_url: Optional[str] = None
    background_color: Optional[str] = None


@dataclass(frozen=True)
class UpdateProjectCommand:
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    due_date: Optional[datetime] = None
    image_url: Optional[str] = None
    background_color: Optional[str] = None


@dataclass(frozen=True)
class DeleteProjectCommand:
    id: uuid.UUID


@dataclass(frozen=True)
class GetProjectByIdQuery:
    id: uuid.UUID


@dataclass(frozen=True)
class GetProjectsQuery:
    page: int = 1
    size: int = 10
    search: Optional[str] = None
    status: Optional[str] = None
    sort: Optional[str] = None
    order: Optional[str] = None


@dataclass(frozen=True)
class GetProjectStatsQuery:
    pass


# =============================================================================
# Helpers
# =============================================================================

SORT_COLUMNS = {
    "name": Project.name,
    "status": Project.status,
    "due_date": Project.due_date,
    "duedate": Project.due_date,
    "created": Project.created_at,
}


def parse_project_status(value: Optional[str]) -> Optional[ProjectStatus]:
    """Lenient status filter: 'all', empty and unknown values mean no filter."""
    if not value:
        return None
    normalized = value.strip().lower().replace("_", "").replace("-", "")
    for status in ProjectStatus:
        if status.value.replace("_", "") == normalized:
            return status
    return None


def project_ordering(sort: Optional[str], order: Optional[str]) -> list:
    column = SORT_COLUMNS.get((sort or "").lower())
    if column is None:
        return []
    if (order or "").lower() == "desc":
        return [column.desc()]
    return [column.asc()]


def progress_percent(total: int, done: int) -> int:
    if total == 0:
        return 0
    return round(done / total * 100)


async def count_tasks_by_project(ctx: HandlerContext, project_ids: list[uuid.UUID]) -> dict:
    """(total, done) task counts per project, from one grouped query."""
    if not project_ids:
        return {}
    statement = (
        select(Task.project_id, Task.status, func.count())
        .where(Task.project_id.in_(project_ids))
        .group_by(Task.project_id, Task.status)
    )
    counts: dict[uuid.UUID, tuple[int, int]] = {}
    for project_id, status, count in await ctx.db.fetch_all(statement):
        total, done = counts.get(project_id, (0, 0))
        total += count
        if status == TaskStatus.DONE:
            done += count
        counts[project_id] = (total, done)
    return counts


def to_list_item(project: Project, counts: tuple[int, int]) -> ProjectListItem:
    total, done = counts
    item = ProjectListItem.model_validate(project)
    item.total_tasks = total
    item.completed_tasks = done
    item.progress = progress_percent(total, done)
    return item


# =============================================================================
# Handlers
# =============================================================================

@handles(CreateProjectCommand)
async def create_project(command: CreateProjectCommand, ctx: HandlerContext) -> Result[uuid.UUID]:
    project = Project(
        name=command.name,
        description=command.description,
        status=command.status,
        due_date=command.due_date,
        image_url=command.image_url,
        background_color=command.background_color,
    )
    ctx.db.projects.add(project)
    await ctx.uow.save_changes()

    ctx.metrics.record_project_created()
    logger.info(f"Created project: id={project.id} name='{project.name}'")
    return Result.success(project.id)


@handles(GetProjectByIdQuery)
async def get_project(query: GetProjectByIdQuery, ctx: HandlerContext) -> Result[ProjectDetails]:
    project = await ctx.db.projects.find(query.id)
    if project is None:
        return Result.failure(Error.not_found("Project", query.id))

    tasks = await ctx.db.tasks.list(Task.project_id == project.id)
    done = sum(1 for task in tasks if task.status == TaskStatus.DONE)

    details = ProjectDetails.model_validate(project)
    details.total_tasks = len(tasks)
    details.completed_tasks = done
    details.progress = progress_percent(len(tasks), done)
    details.tasks = [TaskSummary.model_validate(task) for task in tasks]
    return Result.success(details)


@handles(GetProjectsQuery)
async def get_projects(query: GetProjectsQuery, ctx: HandlerContext) -> Result[Page[ProjectListItem]]:
    criteria = []
    if query.search:
        term = f"%{query.search.lower()}%"
        criteria.append(
            or_(
                func.lower(Project.name).like(term),
                func.lower(Project.description).like(term),
            )
        )
    status = parse_project_status(query.status)
    if status is not None:
        criteria.append(Project.status == status)

    total = await ctx.db.projects.count(*criteria)
    projects = await ctx.db.projects.list(
        *criteria,
        order_by=project_ordering(query.sort, query.order),
        offset=(query.page - 1) * query.size,
        limit=query.size,
    )
    counts = await count_tasks_by_project(ctx, [p.id for p in projects])

    items = [to_list_item(p, counts.get(p.id, (0, 0))) for p in projects]
    logger.debug(f"Listed {len(items)} of {total} projects (page={query.page} size={query.size})")
    return Result.success(Page[ProjectListItem](data=items, total=total, page=query.page, size=query.size))


@handles(UpdateProjectCommand)
async def update_project(command: UpdateProjectCommand, ctx: HandlerContext) -> Result[uuid.UUID]:
    project = await ctx.db.projects.find(command.id)
    if project is None:
        return Result.failure(Error.not_found("Project", command.id))

    project.name = command.name
    project.description = command.description
    project.due_date = command.due_date
    project.image_url = command.image_url
    project.background_color = command.background_color
    if command.status is not None:
        project.status = command.status
    project.mark_modified()

    await ctx.uow.save_changes()
    logger.info(f"Updated project {project.id}")
    return Result.success(project.id)


@handles(DeleteProjectCommand)
async def delete_project(command: DeleteProjectCommand, ctx: HandlerContext) -> Result[uuid.UUID]:
    """Delete a project with its tasks and their pomodoros, atomically."""
    async with ctx.uow.transaction() as transaction:
        project = await ctx.db.projects.find(command.id)
        if project is None:
            return Result.failure(Error.not_found("Project", command.id))

        task_ids = select(Task.id).where(Task.project_id == project.id)
        pomodoros = await ctx.db.pomodoros.delete_where(Pomodoro.task_id.in_(task_ids))
        tasks = await ctx.db.tasks.delete_where(Task.project_id == project.id)
        await ctx.db.projects.remove(project)

        await ctx.uow.save_changes()
        await ctx.uow.commit_transaction(transaction)

    ctx.metrics.record_project_deleted()
    logger.info(
        f"Deleted project {command.id}: '{project.name}' "
        f"({tasks} tasks, {pomodoros} pomodoros)"
    )
    return Result.success(command.id)


@handles(GetProjectStatsQuery)
async def get_project_stats(query: GetProjectStatsQuery, ctx: HandlerContext) -> Result[ProjectStats]:
    projects = await ctx.db.projects.list()
    by_status = Counter(project.status for project in projects)
    return Result.success(
        ProjectStats(
            total=len(projects),
            active=by_status[ProjectStatus.ACTIVE],
            completed=by_status[ProjectStatus.COMPLETED],
            on_hold=by_status[ProjectStatus.ON_HOLD],
        )
    )
