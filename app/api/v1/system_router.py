# app/api/v1/system_router.py
from datetime import datetime
from typing import Any
from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field
from common.config import is_configured
from common.logger import get_app_logger

logger = get_app_logger(name=__name__, track_timing=True)

system_router = APIRouter(tags=["System"])


class HealthCheckResponse(BaseModel):
    status: str = Field(..., description="Current system health status")
    timestamp: datetime = Field(..., description="Server time in ISO 8601 format")
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Deployment environment")
    logging_configured: bool = Field(..., description="Logging configuration status")
    log_level: str = Field(..., description="Application log level")
    database: dict[str, Any] = Field(..., description="Database round-trip check")


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Error message describing the failure")
    timestamp: datetime = Field(..., description="Server time when the error occurred")


@system_router.get(
    "/health",
    response_model=HealthCheckResponse,
    responses={
        200: {"description": "System is healthy", "model": HealthCheckResponse},
        503: {"description": "System is unhealthy", "model": ErrorResponse},
    },
)
async def check_health(request: Request) -> HealthCheckResponse:
    config = request.app.state.config
    database = await request.app.state.db_manager.health_check()

    if not database["healthy"]:
        logger.error("Health check failed", endpoint="/health", **database)
        err = ErrorResponse(
            error=f"database unavailable: {database.get('error')}",
            timestamp=datetime.now(),
        )
        raise HTTPException(status_code=503, detail=err.model_dump(mode="json"))

    logger.info("Health check passed", version=config.app_version, endpoint="/health")
    return HealthCheckResponse(
        status="Healthy",
        timestamp=datetime.now(),
        version=config.app_version,
        environment=config.environment,
        logging_configured=is_configured(),
        log_level=config.logging.level_value,
        database=database,
    )


@system_router.get("/metrics")
async def metrics(request: Request) -> dict[str, Any]:
    """Logger timing and database pool metrics."""
    db_manager = request.app.state.db_manager
    return {
        "logger": logger.get_timing_stats(),
        "database": db_manager.get_config_snapshot(),
        "pool_status": db_manager.engine.pool.status(),
    }


__all__ = ["system_router", "HealthCheckResponse", "ErrorResponse"]
