"""
Structured exceptions and error responses for Taskin.

Provides consistent error handling across the API with:
- A single exception type carrying a typed Error
- The problem body format: {"code", "message", "values"}
- FastAPI exception handlers for request validation and HTTP errors
"""

from http import HTTPStatus
from typing import Any, List

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskin.errors import Error, ErrorKind
from taskin.logging_config import get_logger

logger = get_logger("errors")


# =============================================================================
# Problem Response Schema
# =============================================================================

class ProblemResponse(BaseModel):
    """Structured error body returned for every failure."""
    code: str  # Machine code (e.g., "ENTITY_NOT_FOUND")
    message: str  # Human-readable message
    values: List[Any] = []


INTERNAL_ERROR = Error(
    code="INTERNAL_ERROR",
    message="An error occurred during action handling",
)

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.BUSINESS: status.HTTP_400_BAD_REQUEST,
}


# =============================================================================
# Custom Exceptions
# =============================================================================

class TaskinException(Exception):
    """Raised at the HTTP boundary to hand a typed Error to the middleware."""

    def __init__(self, error: Error):
        self.error = error
        super().__init__(error.message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND.get(self.error.kind, status.HTTP_400_BAD_REQUEST)


def problem_response(error: Error, status_code: int) -> JSONResponse:
    """Serialize an Error as a problem body."""
    body = ProblemResponse(code=error.code, message=error.message, values=list(error.values))
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def response_for_exception(exc: Exception) -> JSONResponse:
    """Choose the status and body for a failure raised while handling a request."""
    if isinstance(exc, TaskinException):
        logger.info(f"Business exception: {exc.error.code} - {exc.error.message}")
        return problem_response(exc.error, exc.status_code)

    logger.error(f"{INTERNAL_ERROR.message}: {exc!r}", exc_info=exc)
    return problem_response(INTERNAL_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)


# =============================================================================
# Exception Handlers
# =============================================================================

async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed input is a 400 with one entry per failing field."""
    details = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    logger.info(f"Validation failed for {request.method} {request.url.path}: {len(details)} error(s)")
    return problem_response(
        Error.validation("One or more validation errors occurred", *details),
        status.HTTP_400_BAD_REQUEST,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing errors (unknown path, wrong method) use the same body format."""
    try:
        code = HTTPStatus(exc.status_code).name
    except ValueError:
        code = "HTTP_ERROR"
    error = Error(code=code, message=str(exc.detail))
    response = problem_response(error, exc.status_code)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
