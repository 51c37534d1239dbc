"""
Taskin - projects, tasks and pomodoro sessions.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import taskin.handlers  # noqa: F401  (registers handlers with the mediator)
from taskin.config import Settings, get_settings
from taskin.database import get_session_context, init_db
from taskin.exceptions import register_exception_handlers
from taskin.logging_config import get_logger, setup_logging
from taskin.metrics import TaskinMetrics, parse_resource_attributes
from taskin.middleware import ErrorHandlingMiddleware, RequestLoggingMiddleware
from taskin.routes import pomodoros, projects, tasks
from taskin.seeder import seed_database

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    settings: Settings = app.state.settings
    logger.info("Starting Taskin API...")
    await init_db()
    logger.info("Database initialized")

    if settings.seed_on_startup:
        async with get_session_context() as session:
            await seed_database(session)

    yield
    logger.info("Shutting down Taskin API...")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Projects, tasks and pomodoro sessions",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.metrics = TaskinMetrics(
        service_name=settings.otel_service_name,
        resource_attributes=parse_resource_attributes(settings.otel_resource_attributes),
        exporter_endpoint=settings.otel_exporter_otlp_endpoint,
    )

    # Register custom exception handlers
    register_exception_handlers(app)

    # Last added runs first: CORS, then request logging, then error mapping
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Location", "X-Request-ID"],
    )

    # Include routers
    app.include_router(projects.router, prefix="/api/projects", tags=["Projects"])
    app.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])
    app.include_router(pomodoros.router, prefix="/api/pomodoros", tags=["Pomodoros"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/metrics")
    async def metrics_snapshot():
        """Business counters and histograms."""
        return app.state.metrics.snapshot()

    return app


app = create_app()
