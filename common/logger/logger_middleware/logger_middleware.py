# common/logger/logger_middleware/logger_middleware.py
"""
Request logging middleware.

Every request gets a request id (taken from X-Request-ID when the caller
sends one), a RequestTimer that the database layer feeds, and one
structured log line when it finishes.

    app.add_middleware(
        RequestLoggingMiddleware,
        expose_performance_headers=True,
        slow_query_threshold=500,
    )
"""

from typing import Callable, Awaitable, Iterable, Optional
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import time
import uuid

from common.context_vars import request_timer_context_var, request_id_context_var
from ..logger import get_app_logger
from .request_timer import RequestTimer
from .middleware_types import (
    RequestMetadata,
    RequestDetails,
    RequestLogEntry,
    PerformanceBreakdown,
    redact,
)

# Query parameters that can identify a patient
DEFAULT_SENSITIVE_PARAMS = ("patient_email", "patient_name", "email")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        *,
        expose_performance_headers: bool = False,
        slow_query_threshold: float = 1000.0,
        query_budget: int = 8,
        sensitive_params: Iterable[str] = DEFAULT_SENSITIVE_PARAMS,
        logger_name: Optional[str] = None,
    ):
        """
        Args:
            expose_performance_headers: Always emit Server-Timing (otherwise
                only routes depending on enable_perf_headers do)
            slow_query_threshold: Milliseconds before a request is flagged slow
            query_budget: SQL statements per request before a warning
            sensitive_params: Query parameters whose values are masked
        """
        super().__init__(app)
        self.expose_performance_headers = expose_performance_headers
        self.slow_query_threshold = slow_query_threshold
        self.query_budget = query_budget
        self.sensitive_params = frozenset(sensitive_params)
        self.logger = get_app_logger(name=logger_name or __name__, track_timing=True)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        timer = RequestTimer()
        timer_token = request_timer_context_var.set(timer)

        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        request_id_token = request_id_context_var.set(request_id)

        start_time = time.perf_counter()
        try:
            try:
                with timer.capture("app"):
                    response = await call_next(request)
            finally:
                duration_ms = (time.perf_counter() - start_time) * 1000
                request_timer_context_var.reset(timer_token)

            response.headers["X-Request-ID"] = request_id

            if self.expose_performance_headers or getattr(
                request.state, "expose_perf", False
            ):
                timing_header = timer.format_server_timing()
                total = f"total;dur={duration_ms:.2f}"
                response.headers["Server-Timing"] = (
                    f"{timing_header}, {total}" if timing_header else total
                )

            self._log_request(
                self._build_log_entry(request, response, duration_ms, timer)
            )
            return response
        finally:
            request_id_context_var.reset(request_id_token)

    def _build_log_entry(
        self,
        request: Request,
        response: Response,
        duration_ms: float,
        timer: RequestTimer,
    ) -> RequestLogEntry:
        route = request.scope.get("route")
        metadata = RequestMetadata(
            method=request.method,
            route=getattr(route, "path", request.url.path),
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )

        details = RequestDetails(
            request_id=request.state.request_id,
            path=request.url.path,
            client_host=request.client.host if request.client else None,
            query_params=(
                redact(dict(request.query_params), self.sensitive_params)
                if request.query_params
                else None
            ),
            idempotency_key=request.headers.get("Idempotency-Key"),
            content_length=int(response.headers.get("content-length", 0)) or None,
        )

        performance = PerformanceBreakdown(
            total_ms=round(duration_ms, 2),
            handler_ms=round(timer.timings.get("app", 0), 2),
            session_ms=round(timer.timings.get("db", 0), 2),
            sql_ms=round(timer.timings.get("sql", 0), 2),
            query_count=int(timer.timings.get("query_count", 0)),
        )

        return RequestLogEntry(
            metadata=metadata,
            details=details,
            performance=performance,
            slow_threshold_ms=self.slow_query_threshold,
            query_budget=self.query_budget,
        )

    def _log_request(self, log_entry: RequestLogEntry) -> None:
        """
        5xx logs at error; slow requests, query warnings and 4xx at warning;
        everything else at info.
        """
        log_data = log_entry.model_dump(mode="json", exclude_none=True)
        status_code = log_entry.metadata.status_code

        if log_entry.is_error:
            self.logger.error("Request failed with server error", **log_data)
        elif log_entry.is_slow:
            self.logger.warning(
                f"Slow request ({log_entry.metadata.duration_ms}ms)", **log_data
            )
        elif status_code >= 400:
            self.logger.warning("Request rejected", **log_data)
        elif log_entry.warnings:
            self.logger.warning("Request completed with query warnings", **log_data)
        else:
            self.logger.info("Request completed", **log_data)


async def enable_perf_headers(request: Request):
    """
    Route dependency: emit Server-Timing for this route even when the
    middleware does not expose it globally.

        @router.get("", dependencies=[Depends(enable_perf_headers)])
    """
    request.state.expose_perf = True


__all__ = [
    "RequestLoggingMiddleware",
    "enable_perf_headers",
]
