"""
Process-wide configuration lifecycle.

    load_dotenv()
    initialize_config()      # once, at startup; fails fast
    config = get_config()    # anywhere afterwards
"""
from typing import Optional
from pydantic import ValidationError
from .app_config import AppConfig, load_app_config
from .structlog_config import configure_structlog
from common.api_error import ConfigurationError

_config: Optional[AppConfig] = None


def _describe(error: ValidationError) -> str:
    lines = [
        f"  - {'.'.join(str(part) for part in item['loc']) or 'config'}: {item['msg']}"
        for item in error.errors()
    ]
    return "Configuration validation failed:\n" + "\n".join(lines)


def initialize_config() -> AppConfig:
    """
    Load and validate configuration from the environment, then configure
    structlog with the loaded level and format.

    Raises:
        ConfigurationError: a variable is missing or any value is invalid
    """
    global _config

    try:
        config = load_app_config()
    except ValidationError as e:
        raise ConfigurationError(_describe(e)) from e

    configure_structlog(config.logging.level_int, config.logging.log_format)
    _config = config
    return config


def get_config() -> AppConfig:
    """
    Raises:
        RuntimeError: initialize_config() has not run in this process
    """
    if _config is None:
        raise RuntimeError(
            "Configuration not initialized. Call initialize_config() at startup."
        )
    return _config


def is_config_initialized() -> bool:
    return _config is not None


def reset_config() -> None:
    """Forget the loaded configuration. FOR TESTING ONLY."""
    global _config
    _config = None


__all__ = [
    "initialize_config",
    "get_config",
    "is_config_initialized",
    "reset_config",
]
