"""
Pomodoro routes for the Taskin API.
"""

import uuid

from fastapi import APIRouter, Depends, Query, Request, Response, status

from taskin.deps import get_mediator
from taskin.handlers.pomodoros import (
    CreatePomodoroCommand,
    DeletePomodoroCommand,
    GetPomodoroByIdQuery,
    GetPomodoroStatsQuery,
    GetPomodorosQuery,
    UpdatePomodoroCommand,
)
from taskin.mediator import Mediator
from taskin.schemas import (
    ActionResponse,
    Page,
    PomodoroCreate,
    PomodoroRead,
    PomodoroStats,
    PomodoroUpdate,
)

router = APIRouter()


@router.get("/", response_model=Page[PomodoroRead])
async def list_pomodoros(
    page: int = Query(default=1, ge=1),
    size: int = Query(default=25, ge=1),
    task_id: uuid.UUID | None = Query(default=None, alias="taskId"),
    mediator: Mediator = Depends(get_mediator),
):
    """List pomodoros, optionally for a single task."""
    query = GetPomodorosQuery(page=page, size=size, task_id=task_id)
    return (await mediator.send(query)).unwrap()


@router.get("/stats", response_model=PomodoroStats)
async def pomodoro_stats(
    task_id: uuid.UUID | None = Query(default=None, alias="taskId"),
    mediator: Mediator = Depends(get_mediator),
):
    """Total and average focus time."""
    return (await mediator.send(GetPomodoroStatsQuery(task_id=task_id))).unwrap()


@router.get("/{pomodoro_id}", response_model=PomodoroRead)
async def get_pomodoro(pomodoro_id: uuid.UUID, mediator: Mediator = Depends(get_mediator)):
    return (await mediator.send(GetPomodoroByIdQuery(id=pomodoro_id))).unwrap()


@router.post("/", response_model=ActionResponse, status_code=status.HTTP_201_CREATED)
async def create_pomodoro(
    pomodoro_in: PomodoroCreate,
    request: Request,
    response: Response,
    mediator: Mediator = Depends(get_mediator),
):
    """Record a pomodoro against a task."""
    pomodoro_id = (await mediator.send(CreatePomodoroCommand(**pomodoro_in.model_dump()))).unwrap()
    response.headers["Location"] = str(request.url_for("get_pomodoro", pomodoro_id=pomodoro_id))
    return ActionResponse(id=pomodoro_id, message="Pomodoro created successfully")


@router.put("/{pomodoro_id}", response_model=ActionResponse)
async def update_pomodoro(
    pomodoro_id: uuid.UUID,
    pomodoro_in: PomodoroUpdate,
    mediator: Mediator = Depends(get_mediator),
):
    command = UpdatePomodoroCommand(id=pomodoro_id, **pomodoro_in.model_dump())
    (await mediator.send(command)).unwrap()
    return ActionResponse(id=pomodoro_id, message="Pomodoro updated successfully")


@router.delete("/{pomodoro_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pomodoro(pomodoro_id: uuid.UUID, mediator: Mediator = Depends(get_mediator)) -> None:
    (await mediator.send(DeletePomodoroCommand(id=pomodoro_id))).unwrap()
