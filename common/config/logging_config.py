from dataclasses import dataclass
from .env_config import require_env, get_env, get_env_bool
from .config_types import EnvBool, EnvLogLevel, EnvLogFormat
from common.api_error import ConfigurationError

_default_log_level_env_key = "LOG_LEVEL"
_default_log_format_env_key = "LOG_FORMAT"
_default_sql_echo_env_key = "LOG_SQL_ECHO"


@dataclass(frozen=True)
class LoggingConfig:
    """
    How the process logs.

    sql_echo turns on SQLAlchemy's statement echo on the engine; it goes
    through stdlib logging, not structlog, and is meant for local debugging.
    """

    log_level: EnvLogLevel
    log_format: EnvLogFormat = EnvLogFormat.CONSOLE
    sql_echo: bool = False

    @property
    def level_value(self) -> str:
        return self.log_level.value

    @property
    def level_int(self) -> int:
        return self.log_level.level


def load_logging_config(
    log_level_env_key: str = _default_log_level_env_key,
    log_format_env_key: str = _default_log_format_env_key,
) -> LoggingConfig:
    """
    LOG_LEVEL is required; LOG_FORMAT defaults to console and LOG_SQL_ECHO
    to false.

    Raises:
        ConfigurationError: missing level, or a level/format outside its enum
    """
    raw_level = require_env(log_level_env_key)
    raw_format = get_env(log_format_env_key) or EnvLogFormat.CONSOLE.value

    try:
        log_level = EnvLogLevel(raw_level.strip().upper())
        log_format = EnvLogFormat(raw_format.strip().lower())
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid logging configuration. "
            f"{log_level_env_key} must be one of {[lvl.value for lvl in EnvLogLevel]}, "
            f"{log_format_env_key} must be one of {[fmt.value for fmt in EnvLogFormat]}"
        ) from exc

    return LoggingConfig(
        log_level=log_level,
        log_format=log_format,
        sql_echo=get_env_bool(_default_sql_echo_env_key, EnvBool.FALSE),
    )


__all__ = [
    "LoggingConfig",
    "load_logging_config",
]
