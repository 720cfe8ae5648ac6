from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional
import logging

from timesheet_tracker.config import Settings, get_settings
from timesheet_tracker.database import Database
from timesheet_tracker.exceptions import ApplicationException
from timesheet_tracker.routers import (
    admin_router,
    stats_router,
    tasks_router,
    timesheets_router,
    users_router,
)
from timesheet_tracker.utils.day_lock import DayLockRegistry
from timesheet_tracker.utils.logging_config import setup_logging, get_log_files_info
from timesheet_tracker.utils.scheduler import MaintenanceScheduler

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApplicationException)
    async def application_exception_handler(request: Request, exc: ApplicationException):
        if exc.status_code >= 500:
            logger.error(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")
        else:
            logger.info(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        message = first.get("msg", "Invalid request")
        # pydantic prefixes custom validator messages
        message = message.removeprefix("Value error, ")
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        return JSONResponse(
            status_code=400,
            content={
                "error": message,
                "kind": "ValidationError",
                "details": {"field": field} if field else {},
            },
        )


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    enable_scheduler: Optional[bool] = None,
) -> FastAPI:
    settings = settings or get_settings()
    database = database or Database(settings.database_url, echo=settings.db_echo)
    day_locks = DayLockRegistry()
    if enable_scheduler is None:
        enable_scheduler = settings.scheduler_enabled
    scheduler = MaintenanceScheduler(settings, database, day_locks) if enable_scheduler else None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        setup_logging(settings.logs_dir, settings.log_level)
        logger.info("Starting Timesheet Tracker...")
        database.init_db()
        if scheduler:
            scheduler.start()
        logger.info("Application started successfully")

        yield

        # Shutdown
        logger.info("Shutting down...")
        if scheduler:
            scheduler.stop()
        database.dispose()
        logger.info("Application stopped")

    app = FastAPI(
        title="Timesheet Tracker",
        description="Daily task logging, timesheet submission and activity stats",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.database = database
    app.state.day_locks = day_locks
    app.state.scheduler = scheduler

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(users_router.router)
    app.include_router(tasks_router.router)
    app.include_router(timesheets_router.router)
    app.include_router(stats_router.router)
    app.include_router(admin_router.router)

    @app.get("/")
    async def root():
        return {
            "message": "Timesheet Tracker API",
            "status": "running",
            "version": "1.0.0",
            "environment": settings.app_env
        }

    @app.get("/health")
    def health_check():
        return {
            "status": "healthy",
            "database": database.health(),
            "scheduler": "running" if scheduler and scheduler.scheduler.running else "disabled",
            "environment": settings.app_env
        }

    @app.get("/logs/info")
    async def logs_info():
        """Get information about current log files."""
        return {
            "logs_directory": settings.logs_dir,
            "log_files": get_log_files_info(settings.logs_dir)
        }

    return app


app = create_app()
