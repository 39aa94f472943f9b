"""Tests for environment-driven configuration."""

import pytest
from pydantic import SecretStr, ValidationError

from common.api_error import ConfigurationError
from common.config import (
    AppConfig,
    DatabaseConfig,
    DbDriver,
    EnvLogFormat,
    EnvLogLevel,
    LoggingConfig,
    load_app_config,
    load_booking_config,
    get_config,
    initialize_config,
    is_config_initialized,
    reset_config,
)

BASE_ENV = {
    "ENVIRONMENT": "development",
    "APP_TITLE": "BookMD",
    "APP_VERSION": "1.2.0",
    "LOG_LEVEL": "info",
    "DATABASE_URL": "sqlite+aiosqlite:///./bookmd.db",
}

OPTIONAL_ENV = (
    "LOG_FORMAT",
    "LOG_SQL_ECHO",
    "DB_POOL_SIZE",
    "DB_MAX_OVERFLOW",
    "DB_POOL_TIMEOUT",
    "DB_POOL_RECYCLE",
    "SLOW_QUERY_THRESHOLD",
    "BOOKING_ENFORCE_AVAILABILITY",
    "BOOKING_REJECT_DOUBLE_BOOKING",
)


@pytest.fixture
def env(monkeypatch):
    for name in OPTIONAL_ENV:
        monkeypatch.delenv(name, raising=False)
    for name, value in BASE_ENV.items():
        monkeypatch.setenv(name, value)
    return monkeypatch


class TestLoadAppConfig:
    """Loading and validating AppConfig from the environment."""

    def test_loads_defaults(self, env):
        config = load_app_config()

        assert config.app_title == "BookMD"
        assert config.logging.log_level == EnvLogLevel.INFO
        assert config.logging.log_format == EnvLogFormat.CONSOLE
        assert config.database.driver == DbDriver.AIOSQLITE
        assert config.database.database_name == "./bookmd.db"
        assert config.booking.enforce_availability is True
        assert config.booking.reject_double_booking is True

    def test_missing_required_variable(self, env):
        env.delenv("APP_TITLE")

        with pytest.raises(ConfigurationError, match="APP_TITLE"):
            load_app_config()

    def test_unknown_environment(self, env):
        env.setenv("ENVIRONMENT", "qa")

        with pytest.raises(ConfigurationError, match="Invalid ENVIRONMENT"):
            load_app_config()

    def test_invalid_log_level(self, env):
        env.setenv("LOG_LEVEL", "chatty")

        with pytest.raises(ConfigurationError, match="LOG_LEVEL"):
            load_app_config()

    def test_pool_overrides(self, env):
        env.setenv("DATABASE_URL", "postgresql+asyncpg://bookmd:secret@db:5432/bookmd")
        env.setenv("DB_POOL_SIZE", "5")

        config = load_app_config()

        assert config.database.pool_size == 5
        assert config.database.driver == DbDriver.ASYNCPG
        assert "secret" not in config.database.to_dict_safe()["url"]

    def test_production_rejects_sqlite(self, env):
        env.setenv("ENVIRONMENT", "production")

        with pytest.raises(ValidationError, match="SQLite"):
            load_app_config()

    def test_unsupported_url_scheme(self, env):
        env.setenv("DATABASE_URL", "mysql://root@localhost/bookmd")

        with pytest.raises(ValidationError, match="Unsupported DATABASE_URL"):
            load_app_config()


class TestBookingConfig:
    """Booking policy switches."""

    def test_switches_can_be_disabled(self, env):
        env.setenv("BOOKING_REJECT_DOUBLE_BOOKING", "False")

        booking = load_booking_config()

        assert booking.reject_double_booking is False
        assert booking.enforce_availability is True

    def test_invalid_flag_is_configuration_error(self, env):
        env.setenv("BOOKING_ENFORCE_AVAILABILITY", "maybe")

        with pytest.raises(ConfigurationError, match="BOOKING_ENFORCE_AVAILABILITY"):
            load_booking_config()


def test_production_rejects_debug_logging():
    with pytest.raises(ValidationError, match="DEBUG"):
        AppConfig(
            app_title="BookMD",
            app_version="1.0.0",
            environment="production",
            logging=LoggingConfig(log_level=EnvLogLevel.DEBUG),
            database=DatabaseConfig(
                url=SecretStr("postgresql+asyncpg://bookmd@db/bookmd")
            ),
        )


class TestInitializeConfig:
    """Process-wide lifecycle around load_app_config."""

    @pytest.fixture(autouse=True)
    def clean_state(self):
        reset_config()
        yield
        reset_config()

    def test_get_before_initialize_fails(self):
        assert not is_config_initialized()

        with pytest.raises(RuntimeError, match="initialize_config"):
            get_config()

    def test_initialize_then_get(self, env):
        # Same level the test session configured structlog with
        env.setenv("LOG_LEVEL", "WARNING")

        config = initialize_config()

        assert is_config_initialized()
        assert get_config() is config

    def test_validation_errors_become_configuration_error(self, env):
        env.setenv("ENVIRONMENT", "production")

        with pytest.raises(ConfigurationError, match="Configuration validation failed"):
            initialize_config()

        assert not is_config_initialized()
