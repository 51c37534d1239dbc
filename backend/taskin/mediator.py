"""
Request dispatch for Taskin.

Each command or query is a dataclass with exactly one handler, registered
with ``@handles(RequestType)``. The Mediator looks the handler up by the
request's type and wraps the call with logging and timing.
"""

import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from taskin.errors import Result
from taskin.logging_config import get_logger
from taskin.metrics import TaskinMetrics
from taskin.persistence import TaskinDbContext, UnitOfWork

logger = get_logger(__name__)


@dataclass
class HandlerContext:
    """Collaborators a handler may use, scoped to one request."""

    db: TaskinDbContext
    uow: UnitOfWork
    metrics: TaskinMetrics


Handler = Callable[[Any, HandlerContext], Awaitable[Result[Any]]]

_registry: dict[type, Handler] = {}


def handles(request_type: type) -> Callable[[Handler], Handler]:
    """Register the decorated coroutine as the handler for request_type."""

    def decorator(handler: Handler) -> Handler:
        if request_type in _registry:
            raise ValueError(f"{request_type.__name__} already has a handler")
        _registry[request_type] = handler
        return handler

    return decorator


def registered_handlers() -> dict[type, Handler]:
    return dict(_registry)


class Mediator:
    def __init__(self, context: HandlerContext, handlers: Optional[dict[type, Handler]] = None):
        self.context = context
        self._handlers = _registry if handlers is None else handlers

    async def send(self, request: Any) -> Result[Any]:
        request_name = type(request).__name__
        handler = self._handlers.get(type(request))
        if handler is None:
            raise LookupError(f"No handler registered for {request_name}")

        logger.info(f"Handling {request_name} with payload: {request!r}")
        started = time.perf_counter()
        try:
            result = await handler(request, self.context)
        except Exception as exc:
            logger.error(f"Error handling {request_name}: {exc!r}")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        if result.is_failure:
            logger.info(f"{request_name} failed: {result.error.code} ({elapsed_ms:.1f}ms)")
        else:
            logger.info(f"Handled {request_name} ({elapsed_ms:.1f}ms)")
        return result
