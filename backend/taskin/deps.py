"""
FastAPI dependencies shared by the routers.

Application-wide objects live on ``app.state``; the session and everything
built on it is scoped to one request.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from taskin.database import get_session
from taskin.mediator import HandlerContext, Mediator
from taskin.metrics import TaskinMetrics
from taskin.persistence import TaskinDbContext, UnitOfWork


def get_metrics(request: Request) -> TaskinMetrics:
    """Return the application's metrics instance."""
    return request.app.state.metrics


async def get_mediator(
    session: AsyncSession = Depends(get_session),
    metrics: TaskinMetrics = Depends(get_metrics),
) -> Mediator:
    context = HandlerContext(
        db=TaskinDbContext(session),
        uow=UnitOfWork(session),
        metrics=metrics,
    )
    return Mediator(context)
