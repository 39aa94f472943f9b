# common/logger/logger.py
"""
Application logger.

    from common.logger import get_app_logger

    logger = get_app_logger(__name__)
    logger.info("Appointment requested", appointment_id=appointment_id)

    log = logger.bind(doctor_id=doctor_id)   # context carried on every call
    log.warning("Slot rejected", reason=reason)

Loggers can be created at import time; the structlog logger behind them
is resolved on first use, after configure_structlog() has run.
"""

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional
import structlog

from common.config.structlog_config import get_logger as _get_structlog_logger
from common.context_vars import request_id_context_var


@dataclass
class TimingStats:
    """Cost of the log calls themselves, exposed on /metrics."""

    total_calls: int = 0
    total_time: float = 0.0
    max_time: float = 0.0
    min_time: float = float("inf")

    def record(self, elapsed: float) -> None:
        self.total_calls += 1
        self.total_time += elapsed
        self.max_time = max(self.max_time, elapsed)
        self.min_time = min(self.min_time, elapsed)

    def get_stats(self) -> Dict[str, Any]:
        avg = self.total_time / self.total_calls if self.total_calls else 0.0
        return {
            "total_calls": self.total_calls,
            "avg_time_ms": avg * 1000,
            "max_time_ms": self.max_time * 1000,
            "min_time_ms": 0.0 if self.total_calls == 0 else self.min_time * 1000,
        }


class AppLogger:
    def __init__(
        self,
        name: str = "app",
        track_timing: bool = False,
        context: Optional[Dict[str, Any]] = None,
        timing_stats: Optional[TimingStats] = None,
    ) -> None:
        self._name = name
        self._context = dict(context or {})
        self._logger_instance: Optional[structlog.BoundLogger] = None
        self._timing_stats = timing_stats or (TimingStats() if track_timing else None)

    @property
    def _logger(self) -> structlog.BoundLogger:
        if self._logger_instance is None:
            self._logger_instance = _get_structlog_logger(self._name)
        return self._logger_instance

    def bind(self, **context: Any) -> "AppLogger":
        """Child logger sharing name and timing stats, with extra context."""
        return AppLogger(
            self._name,
            context={**self._context, **context},
            timing_stats=self._timing_stats,
        )

    def _log(self, level: str, msg: str, **kwargs: Any) -> None:
        start_time = time.perf_counter() if self._timing_stats is not None else None

        try:
            request_id = request_id_context_var.get()
            if request_id is not None:
                kwargs.setdefault("request_id", request_id)
            getattr(self._logger, level)(msg, **{**self._context, **kwargs})
        finally:
            if start_time is not None:
                self._timing_stats.record(time.perf_counter() - start_time)

    def debug(self, msg: str, **kwargs: Any) -> None:
        self._log("debug", msg, **kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._log("info", msg, **kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self._log("warning", msg, **kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        self._log("error", msg, **kwargs)

    def critical(self, msg: str, **kwargs: Any) -> None:
        self._log("critical", msg, **kwargs)

    def get_timing_stats(self) -> Dict[str, Any]:
        if self._timing_stats is None:
            return {"error": "Timing tracking not enabled"}
        return self._timing_stats.get_stats()


def get_app_logger(name: str = "app", track_timing: bool = False) -> AppLogger:
    return AppLogger(name=name, track_timing=track_timing)


# Convenience instance for simple usage
logger = get_app_logger()

__all__ = ["logger", "AppLogger", "TimingStats", "get_app_logger"]
