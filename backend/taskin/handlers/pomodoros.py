"""
Pomodoro commands and queries.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from taskin.errors import Error, Result
from taskin.logging_config import get_logger
from taskin.mediator import HandlerContext, handles
from taskin.models import Pomodoro
from taskin.schemas import Page, PomodoroRead, PomodoroStats

logger = get_logger(__name__)


@dataclass(frozen=True)
class CreatePomodoroCommand:
    task_id: uuid.UUID
    start_time: datetime
    duration_in_minutes: int = 25


@dataclass(frozen=True)
class UpdatePomodoroCommand:
    id: uuid.UUID
    start_time: Optional[datetime] = None
    duration_in_minutes: Optional[int] = None


@dataclass(frozen=True)
class DeletePomodoroCommand:
    id: uuid.UUID


@dataclass(frozen=True)
class GetPomodoroByIdQuery:
    id: uuid.UUID


@dataclass(frozen=True)
class GetPomodorosQuery:
    page: int = 1
    size: int = 25
    task_id: Optional[uuid.UUID] = None


@dataclass(frozen=True)
class GetPomodorosByTaskIdQuery:
    task_id: uuid.UUID


@dataclass(frozen=True)
class GetPomodoroStatsQuery:
    task_id: Optional[uuid.UUID] = None


@handles(CreatePomodoroCommand)
async def create_pomodoro(command: CreatePomodoroCommand, ctx: HandlerContext) -> Result[uuid.UUID]:
    pomodoro = Pomodoro(
        task_id=command.task_id,
        start_time=command.start_time,
        duration_in_minutes=command.duration_in_minutes,
    )
    ctx.db.pomodoros.add(pomodoro)
    await ctx.uow.save_changes()

    ctx.metrics.record_pomodoro_created()
    ctx.metrics.record_pomodoro_duration(pomodoro.duration_in_minutes)
    logger.info(
        f"Created pomodoro: id={pomodoro.id} task={pomodoro.task_id} "
        f"duration={pomodoro.duration_in_minutes}m"
    )
    return Result.success(pomodoro.id)


@handles(GetPomodoroByIdQuery)
async def get_pomodoro(query: GetPomodoroByIdQuery, ctx: HandlerContext) -> Result[PomodoroRead]:
    pomodoro = await ctx.db.pomodoros.find(query.id)
    if pomodoro is None:
        return Result.failure(Error.not_found("Pomodoro", query.id))
    return Result.success(PomodoroRead.model_validate(pomodoro))


@handles(GetPomodorosQuery)
async def get_pomodoros(query: GetPomodorosQuery, ctx: HandlerContext) -> Result[Page[PomodoroRead]]:
    criteria = []
    if query.task_id is not None:
        criteria.append(Pomodoro.task_id == query.task_id)

    total = await ctx.db.pomodoros.count(*criteria)
    pomodoros = await ctx.db.pomodoros.list(
        *criteria,
        offset=(query.page - 1) * query.size,
        limit=query.size,
    )
    items = [PomodoroRead.model_validate(p) for p in pomodoros]
    return Result.success(Page[PomodoroRead](data=items, total=total, page=query.page, size=query.size))


@handles(GetPomodorosByTaskIdQuery)
async def get_pomodoros_by_task(
    query: GetPomodorosByTaskIdQuery, ctx: HandlerContext
) -> Result[list[PomodoroRead]]:
    pomodoros = await ctx.db.pomodoros.list(Pomodoro.task_id == query.task_id)
    return Result.success([PomodoroRead.model_validate(p) for p in pomodoros])


@handles(UpdatePomodoroCommand)
async def update_pomodoro(command: UpdatePomodoroCommand, ctx: HandlerContext) -> Result[uuid.UUID]:
    pomodoro = await ctx.db.pomodoros.find(command.id)
    if pomodoro is None:
        return Result.failure(Error.not_found("Pomodoro", command.id))

    if command.start_time is not None:
        pomodoro.start_time = command.start_time
    if command.duration_in_minutes is not None:
        pomodoro.duration_in_minutes = command.duration_in_minutes
    pomodoro.mark_modified()

    await ctx.uow.save_changes()
    logger.info(f"Updated pomodoro {pomodoro.id}")
    return Result.success(pomodoro.id)


@handles(DeletePomodoroCommand)
async def delete_pomodoro(command: DeletePomodoroCommand, ctx: HandlerContext) -> Result[uuid.UUID]:
    pomodoro = await ctx.db.pomodoros.find(command.id)
    if pomodoro is None:
        return Result.failure(Error.not_found("Pomodoro", command.id))

    await ctx.db.pomodoros.remove(pomodoro)
    await ctx.uow.save_changes()

    ctx.metrics.record_pomodoro_deleted()
    logger.info(f"Deleted pomodoro {command.id}")
    return Result.success(command.id)


@handles(GetPomodoroStatsQuery)
async def get_pomodoro_stats(query: GetPomodoroStatsQuery, ctx: HandlerContext) -> Result[PomodoroStats]:
    criteria = []
    if query.task_id is not None:
        criteria.append(Pomodoro.task_id == query.task_id)
    pomodoros = await ctx.db.pomodoros.list(*criteria)

    total_minutes = sum(p.duration_in_minutes for p in pomodoros)
    average = round(total_minutes / len(pomodoros), 2) if pomodoros else 0.0
    return Result.success(
        PomodoroStats(total=len(pomodoros), total_minutes=total_minutes, average_duration=average)
    )
