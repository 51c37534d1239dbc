"""
ASGI middlewares for the Taskin API.

- ErrorHandlingMiddleware: single interception point turning failures into problem bodies
- RequestLoggingMiddleware: one log line per request plus an X-Request-ID header
"""

import time
import uuid

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from taskin.exceptions import response_for_exception
from taskin.logging_config import get_logger

logger = get_logger("http")


class ErrorHandlingMiddleware:
    """
    Wrap the downstream pipeline and map any exception to a problem response.

    The response is emitted at most once: if the application already sent
    ``http.response.start`` before failing, nothing more can be written, so
    the failure is logged and re-raised for the server to close the connection.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            if response_started:
                logger.error(f"Failure after response started for {scope.get('path')}: {exc!r}")
                raise
            response = response_for_exception(exc)
            await response(scope, receive, send)


class RequestLoggingMiddleware:
    """Log method, path, status and duration of every HTTP request."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = _incoming_request_id(scope) or uuid.uuid4().hex
        status_code = 500
        started = time.perf_counter()

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", request_id.encode("latin-1")))
                message = {**message, "headers": headers}
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                f"{scope['method']} {scope['path']} -> {status_code} "
                f"({elapsed_ms:.1f}ms) request_id={request_id}"
            )


def _incoming_request_id(scope: Scope) -> str | None:
    for name, value in scope.get("headers", []):
        if name == b"x-request-id":
            return value.decode("latin-1")
    return None
