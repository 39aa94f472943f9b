# app/application.py
"""
FastAPI application factory.

main.py builds the app from the environment; tests build it around an
already-open DbManager (ASGI lifespan does not run under httpx transports).
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from common.api_error import AppError
from common.config import AppConfig, Environment
from common.logger import get_app_logger
from common.logger.logger_middleware import RequestLoggingMiddleware
from app.api.v1 import routers
from app.db import DbManager
from app.domain.event_dispatcher import DomainEventsDispatcher, create_default_dispatcher

logger = get_app_logger(name=__name__)


def create_app(
    config: AppConfig,
    *,
    db_manager: Optional[DbManager] = None,
    event_dispatcher: Optional[DomainEventsDispatcher] = None,
    verify_migrations: bool = True,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if db_manager is not None:
            # Owned by the caller
            yield
            return

        _db_config = config.database
        if not _db_config:
            raise RuntimeError("Database configuration required")

        logger.info("Database configuration", **_db_config.to_dict_safe())

        manager = DbManager.from_config(_db_config, echo=config.logging.sql_echo)
        await manager.verify_connection()

        # Ensure migrations are up-to-date (fail fast if not)
        if verify_migrations:
            try:
                await manager.verify_migrations_current()
                logger.info("✓ All migrations applied")
            except RuntimeError as e:
                logger.error(f"❌ Migration check failed: {e}")
                logger.error("Run 'alembic upgrade head'")
                raise

        app.state.db_manager = manager

        yield
        logger.info("shutting down")
        await manager.dispose()

    app = FastAPI(
        title=config.app_title,
        version=config.app_version,
        description=f"Running in {config.environment} environment",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.booking_config = config.booking
    app.state.event_dispatcher = event_dispatcher or create_default_dispatcher()
    if db_manager is not None:
        app.state.db_manager = db_manager

    app.add_middleware(
        RequestLoggingMiddleware,
        expose_performance_headers=not Environment(config.environment).is_production,
        slow_query_threshold=(
            config.database.slow_query_threshold if config.database else 1000.0
        ),
    )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            f"Domain Error: {exc.code}",
            path=request.url.path,
            error_code=exc.code,
            message=exc.message,
        )

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.code,
                "message": exc.message,
                "timestamp": datetime.now().isoformat(),
            },
        )

    for router in routers:
        app.include_router(router)

    return app


__all__ = ["create_app"]
