"""Enumerations accepted by environment variables."""

from enum import Enum
import logging


class EnvBool(str, Enum):
    """Accepted spellings of a boolean flag (compared lowercase)."""

    TRUE = "true"
    FALSE = "false"

    @property
    def enabled(self) -> bool:
        return self is EnvBool.TRUE

    def __str__(self) -> str:
        return self.value


class EnvLogLevel(str, Enum):
    """
    LOG_LEVEL values.

    A str subclass, so members serialize to JSON as their value:
        >>> str(EnvLogLevel.WARNING)
        'WARNING'
    """

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def level(self) -> int:
        return getattr(logging, self.value)

    def __str__(self) -> str:
        return self.value


class EnvLogFormat(str, Enum):
    """How structlog renders the final event."""

    CONSOLE = "console"
    JSON = "json"

    def __str__(self) -> str:
        return self.value


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"

    @property
    def is_production(self) -> bool:
        return self is Environment.PRODUCTION

    def __str__(self) -> str:
        return self.value


class DbDriver(str, Enum):
    """Supported async database drivers, keyed by the URL scheme suffix."""

    ASYNCPG = "asyncpg"
    AIOSQLITE = "aiosqlite"

    @property
    def is_sqlite(self) -> bool:
        return self is DbDriver.AIOSQLITE


__all__ = [
    "EnvBool",
    "EnvLogLevel",
    "EnvLogFormat",
    "Environment",
    "DbDriver",
]
