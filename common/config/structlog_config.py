"""
structlog setup, done once per process by configure_structlog().

uvicorn's reloader runs the app in a child process that inherits this
module's state; the state is therefore keyed by pid and a child configures
structlog again.
"""
import logging
import os
import sys
import threading
from dataclasses import dataclass
from typing import Any, Optional
import structlog
from rich.traceback import install as install_rich_traceback
from .config_types import EnvLogFormat


@dataclass
class _Configured:
    log_level: int
    log_format: EnvLogFormat
    pid: int


_lock = threading.Lock()
_configured: Optional[_Configured] = None


def _current() -> Optional[_Configured]:
    if _configured is not None and _configured.pid == os.getpid():
        return _configured
    return None


def _processors(log_format: EnvLogFormat) -> list[Any]:
    shared: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
    ]
    if log_format == EnvLogFormat.JSON:
        return shared + [
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return shared + [
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
        structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.RichTracebackFormatter(
                show_locals=False,
                width=None,
                suppress=["starlette", "uvicorn", "fastapi", "sqlalchemy"],
            ),
        ),
    ]


def configure_structlog(
    log_level: int,
    log_format: EnvLogFormat = EnvLogFormat.CONSOLE,
) -> None:
    """
    Configure structlog for this process.

    Calling again with the same level is a no-op.

    Raises:
        RuntimeError: already configured in this process with another level
    """
    global _configured

    with _lock:
        current = _current()
        if current is not None:
            if current.log_level == log_level:
                return
            raise RuntimeError(
                f"structlog already configured in this process. "
                f"Current level: {current.log_level}, attempted: {log_level}"
            )

        if log_format == EnvLogFormat.CONSOLE:
            install_rich_traceback(show_locals=True, width=None, extra_lines=3)

        structlog.configure(
            processors=_processors(log_format),
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
            cache_logger_on_first_use=True,
        )
        # stdlib loggers (SQLAlchemy echo, alembic) share the level and stream
        logging.basicConfig(level=log_level, stream=sys.stderr, format="%(message)s")

        _configured = _Configured(log_level, log_format, os.getpid())


def get_logger(name: str = "app") -> structlog.BoundLogger:
    """
    Raises:
        RuntimeError: configure_structlog() has not run in this process
    """
    if _current() is None:
        raise RuntimeError(
            "structlog not configured. "
            "Call configure_structlog() at application startup."
        )
    return structlog.get_logger(name)


def is_configured() -> bool:
    return _current() is not None


__all__ = [
    "configure_structlog",
    "get_logger",
    "is_configured",
]
