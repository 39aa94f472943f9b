# common/logger/logger_middleware/middleware_types.py
"""
Structured shapes of one request log line.
"""

from typing import Optional, Dict, Any
from datetime import datetime
from pydantic import BaseModel, Field, computed_field

REDACTED = "***"


class PerformanceBreakdown(BaseModel):
    """Where a request spent its time, from the per-request timer."""

    total_ms: float
    handler_ms: float
    session_ms: float = Field(0.0, description="Open-to-close time of DB sessions")
    sql_ms: float = Field(0.0, description="Time inside cursor.execute")
    query_count: int = Field(0, description="SQL statements executed")

    @property
    def session_overhead_ms(self) -> float:
        """Session time not spent executing SQL (pool checkout, commit)."""
        return round(self.session_ms - self.sql_ms, 2)


class RequestMetadata(BaseModel):
    method: str
    # Route template, e.g. /appointments/{appointment_id}/status
    route: str
    status_code: int = Field(..., ge=100, le=599)
    duration_ms: float = Field(..., ge=0)

    model_config = {"frozen": True}


class RequestDetails(BaseModel):
    request_id: Optional[str] = None
    path: Optional[str] = Field(None, description="Concrete path with ids")
    client_host: Optional[str] = None
    query_params: Optional[Dict[str, Any]] = None
    idempotency_key: Optional[str] = None
    content_length: Optional[int] = Field(None, ge=0)

    model_config = {"frozen": True}


def redact(params: Dict[str, Any], sensitive: frozenset[str]) -> Dict[str, Any]:
    """Mask values of sensitive keys (patient emails, names)."""
    return {k: (REDACTED if k in sensitive else v) for k, v in params.items()}


class RequestLogEntry(BaseModel):
    timestamp: datetime = Field(default_factory=datetime.now)
    metadata: RequestMetadata
    details: Optional[RequestDetails] = None
    performance: Optional[PerformanceBreakdown] = None
    slow_threshold_ms: float = Field(1000.0, exclude=True)
    query_budget: int = Field(8, exclude=True)

    model_config = {"frozen": True}

    @computed_field
    def is_slow(self) -> bool:
        return self.metadata.duration_ms > self.slow_threshold_ms

    @computed_field
    def is_error(self) -> bool:
        return self.metadata.status_code >= 500

    @computed_field
    def warnings(self) -> list[str]:
        """
        Query-shape warnings. A doctor listing costs three statements
        (doctors joined with users, schedules, breaks); a request far above
        the budget usually means a lazy load slipped in.
        """
        found: list[str] = []
        perf = self.performance
        if perf is None:
            return found

        if perf.query_count > self.query_budget:
            found.append(
                f"QUERY_BUDGET_EXCEEDED: {perf.query_count} statements "
                f"(budget {self.query_budget})"
            )
        if perf.sql_ms > self.slow_threshold_ms:
            found.append(f"SLOW_SQL: {perf.sql_ms:.0f}ms executing statements")
        if perf.session_overhead_ms > self.slow_threshold_ms / 2:
            found.append(
                f"SESSION_OVERHEAD: {perf.session_overhead_ms:.0f}ms outside SQL "
                f"(pool exhausted or slow commit)"
            )
        return found


__all__ = [
    "RequestMetadata",
    "RequestDetails",
    "RequestLogEntry",
    "PerformanceBreakdown",
    "redact",
]
