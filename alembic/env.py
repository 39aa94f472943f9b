"""
Alembic environment.

Migrations only need DATABASE_URL, so this loads the database section of
the app configuration instead of the whole AppConfig. The async driver the
app runs with is swapped for its sync counterpart.
"""

import sys
from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import make_url
from alembic import context
from dotenv import load_dotenv

from app.db.models import DbBaseModel
from common.api_error import ConfigurationError
from common.config import load_database_config

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = DbBaseModel.metadata

_SYNC_DRIVERS = {
    "postgresql+asyncpg": "postgresql+psycopg2",
    "sqlite+aiosqlite": "sqlite",
}


def get_sync_url() -> str:
    load_dotenv()
    try:
        database = load_database_config()
    except (ConfigurationError, ValueError) as e:
        print(f"FATAL: Configuration error:\n{e}")
        sys.exit(1)
    if database is None:
        print("FATAL: DATABASE_URL is not set")
        sys.exit(1)

    url = make_url(database.get_connection_url(include_password=True))
    return url.set(drivername=_SYNC_DRIVERS[url.drivername]).render_as_string(
        hide_password=False
    )


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of running it."""
    context.configure(
        url=get_sync_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_sync_url()

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            # SQLite cannot ALTER most constraints in place
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
