# app/db/db_manager.py
"""
Database manager focused on connection management and session handling.
Schema migrations are handled separately via Alembic CLI.

Design principles:
- Single responsibility: Connection/session management only
- Fail fast: Invalid configuration crashes on startup
- Explicit over implicit: No magic auto-migrations
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Any, Optional, Union
from sqlalchemy import event, inspect, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
    AsyncEngine,
)
from sqlalchemy.pool import StaticPool
from common import AppError, DatabaseConfig, logger
from common.context_vars import request_timer_context_var


class DbManager:
    """
    Database connection and session manager.

    Responsibilities:
    - Async engine/connection pool management
    - Session lifecycle management
    - Per-request SQL timing (Server-Timing "sql", query_count)
    - Health checks

    NOT responsible for:
    - Schema creation/migration (use Alembic CLI)

    Usage:
        # Startup
        db_manager = DbManager.from_config(config.database)
        await db_manager.verify_connection()

        # Runtime
        async with db_manager.session() as session:
            result = await session.execute(...)

        # Shutdown
        await db_manager.dispose()
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 10,
        max_overflow: int = 20,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        pool_pre_ping: bool = True,
        echo: bool = False,
        connect_args: Optional[dict[str, Any]] = None,
    ):
        """
        Args:
            url: Database URL (postgresql+asyncpg:// or sqlite+aiosqlite://)
            pool_size: Number of persistent connections
            max_overflow: Additional connections beyond pool_size
            pool_timeout: Seconds to wait for connection from pool
            pool_recycle: Recycle connections after N seconds
            pool_pre_ping: Test connections before using
            echo: Log all SQL statements (use for debugging)
            connect_args: Driver-specific connection arguments
        """
        self._validate_url(url)
        parsed = make_url(url)
        self.is_sqlite = parsed.get_backend_name() == "sqlite"

        self._config: dict[str, Union[str, int]] = {
            "url": parsed.render_as_string(hide_password=True),
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_timeout": pool_timeout,
            "pool_recycle": pool_recycle,
        }

        engine_kwargs: dict[str, Any] = {
            "echo": echo,
            "connect_args": connect_args or {},
        }
        if self.is_sqlite:
            # An in-memory database lives as long as its single connection
            if parsed.database in (None, "", ":memory:"):
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
                pool_pre_ping=pool_pre_ping,
            )

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self._install_timing_hooks()

        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        logger.info(
            "DbManager initialized",
            url=self._config["url"],
            pool_size=None if self.is_sqlite else pool_size,
            max_overflow=None if self.is_sqlite else max_overflow,
        )

    @classmethod
    def from_config(cls, config: DatabaseConfig, **kwargs: Any) -> "DbManager":
        """
        Create DbManager from DatabaseConfig.

        Example:
            db_manager = DbManager.from_config(config.database)
        """
        return cls(
            url=config.get_connection_url(include_password=True),
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
            pool_recycle=config.pool_recycle,
            **kwargs,
        )

    @staticmethod
    def _validate_url(url: str) -> None:
        """Validate database URL format."""
        if not url or not url.startswith(
            ("postgresql+asyncpg://", "sqlite+aiosqlite://")
        ):
            raise ValueError(
                f"Invalid database URL. Expected postgresql+asyncpg:// or sqlite+aiosqlite://, got: {url[:20]}..."
            )

    def _install_timing_hooks(self) -> None:
        """Feed every statement's duration into the current request's timer."""
        sync_engine = self.engine.sync_engine

        @event.listens_for(sync_engine, "before_cursor_execute")
        def _before_cursor_execute(
            conn, cursor, statement, parameters, context, executemany
        ):
            conn.info.setdefault("query_start_time", []).append(time.perf_counter())

        @event.listens_for(sync_engine, "after_cursor_execute")
        def _after_cursor_execute(
            conn, cursor, statement, parameters, context, executemany
        ):
            started = conn.info["query_start_time"].pop()
            timer = request_timer_context_var.get()
            if timer is None:
                return
            timer.add("sql", (time.perf_counter() - started) * 1000)
            timer.increment("query_count")

    async def verify_connection(self) -> None:
        """
        Verify database connection on startup.
        Fails fast if connection cannot be established.

        Raises:
            ConnectionError: If connection fails
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("✓ Database connection verified")
        except Exception as e:
            logger.error(f"❌ Database connection failed: {e}")
            raise ConnectionError(f"Failed to connect to database: {e}") from e

    async def verify_migrations_current(self) -> str:
        """
        Check that Alembic migrations have been applied.

        Returns:
            The current migration revision

        Raises:
            RuntimeError: If alembic_version table doesn't exist or is empty
        """
        async with self.engine.connect() as conn:
            has_table = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).has_table("alembic_version")
            )
            if not has_table:
                raise RuntimeError(
                    "alembic_version table not found. "
                    "Have you run 'alembic upgrade head'?"
                )

            result = await conn.execute(text("SELECT version_num FROM alembic_version"))
            current_version = result.scalar()

        if not current_version:
            raise RuntimeError("No migration revision recorded in alembic_version")

        logger.info(f"Current migration version: {current_version}")
        return current_version

    @asynccontextmanager
    async def session(
        self, *, autocommit: bool = True
    ) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a transactional database session.

        With autocommit (default) the session commits on success; without it
        the caller owns the commit (see UnitOfWork.save_changes). Either way
        an exception rolls back, and close() releases anything left open,
        including on task cancellation.
        """
        session = self.session_maker()
        timer = request_timer_context_var.get()
        started = time.perf_counter()
        try:
            yield session
            if autocommit:
                await session.commit()
        except Exception as e:
            await session.rollback()
            # Domain rejections are logged by the API error handler
            if not isinstance(e, AppError):
                logger.error(f"Session error, rolled back: {e}")
            raise
        finally:
            await session.close()
            if timer is not None:
                timer.add("db", (time.perf_counter() - started) * 1000)

    async def health_check(self) -> dict[str, Any]:
        """
        Health check with connection round-trip time.

        Example:
            {
                "healthy": True,
                "response_time_ms": 5.2,
                "pool_status": "Pool size: 10  Connections in pool: 1 ..."
            }
        """
        start = time.perf_counter()

        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("Database health check failed", error=str(e))
            return {
                "healthy": False,
                "error": str(e),
            }

        return {
            "healthy": True,
            "response_time_ms": round((time.perf_counter() - start) * 1000, 2),
            "pool_status": self.engine.pool.status(),
        }

    async def dispose(self) -> None:
        """
        Dispose of all connections and cleanup resources.
        Call this on application shutdown.
        """
        await self.engine.dispose()
        logger.info("✓ Database connections disposed")

    def get_config_snapshot(self) -> dict[str, Any]:
        """Get current configuration (for monitoring/debugging)."""
        return self._config.copy()


__all__ = ["DbManager"]
