"""
Project routes for the Taskin API.
"""

import uuid

from fastapi import APIRouter, Depends, Query, Request, Response, status

from taskin.deps import get_mediator
from taskin.handlers.projects import (
    CreateProjectCommand,
    DeleteProjectCommand,
    GetProjectByIdQuery,
    GetProjectStatsQuery,
    GetProjectsQuery,
    UpdateProjectCommand,
)
from taskin.handlers.tasks import GetTasksByProjectIdQuery
from taskin.mediator import Mediator
from taskin.schemas import (
    ActionResponse,
    Page,
    ProjectCreate,
    ProjectDetails,
    ProjectListItem,
    ProjectStats,
    ProjectUpdate,
    TaskRead,
)

router = APIRouter()


@router.get("/", response_model=Page[ProjectListItem])
async def list_projects(
    page: int = Query(default=1, ge=1),
    size: int = Query(default=10, ge=1),
    search: str | None = None,
    status_filter: str | None = Query(default=None, alias="status"),
    sort: str | None = None,
    order: str | None = None,
    mediator: Mediator = Depends(get_mediator),
):
    """List projects, one page at a time, with task progress."""
    query = GetProjectsQuery(
        page=page,
        size=size,
        search=search,
        status=status_filter,
        sort=sort,
        order=order,
    )
    return (await mediator.send(query)).unwrap()


@router.get("/stats", response_model=ProjectStats)
async def project_stats(mediator: Mediator = Depends(get_mediator)):
    """Count projects by status."""
    return (await mediator.send(GetProjectStatsQuery())).unwrap()


@router.get("/{project_id}", response_model=ProjectDetails)
async def get_project(project_id: uuid.UUID, mediator: Mediator = Depends(get_mediator)):
    """Get a project with a summary of its tasks."""
    return (await mediator.send(GetProjectByIdQuery(id=project_id))).unwrap()


@router.get("/{project_id}/tasks", response_model=list[TaskRead])
async def list_project_tasks(project_id: uuid.UUID, mediator: Mediator = Depends(get_mediator)):
    """List every task of a project."""
    return (await mediator.send(GetTasksByProjectIdQuery(project_id=project_id))).unwrap()


@router.post("/", response_model=ActionResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_in: ProjectCreate,
    request: Request,
    response: Response,
    mediator: Mediator = Depends(get_mediator),
):
    """Create a new project."""
    project_id = (await mediator.send(CreateProjectCommand(**project_in.model_dump()))).unwrap()
    response.headers["Location"] = str(request.url_for("get_project", project_id=project_id))
    return ActionResponse(id=project_id, message="Project created successfully")


@router.put("/{project_id}", response_model=ActionResponse)
async def update_project(
    project_id: uuid.UUID,
    project_in: ProjectUpdate,
    mediator: Mediator = Depends(get_mediator),
):
    """Replace a project's editable fields."""
    command = UpdateProjectCommand(id=project_id, **project_in.model_dump())
    (await mediator.send(command)).unwrap()
    return ActionResponse(id=project_id, message="Project updated successfully")


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(project_id: uuid.UUID, mediator: Mediator = Depends(get_mediator)) -> None:
    """Delete a project together with its tasks and their pomodoros."""
    (await mediator.send(DeleteProjectCommand(id=project_id))).unwrap()
