# seed_db.py
"""
Database Seeding Script
=======================

Inserts doctors (with the default Monday-Friday schedule) and patients
through the application services.

Usage:
    python seed_db.py --records 20
    python seed_db.py --records 50 --start-index 100 --only patients

Requirements:
    - A valid configuration in the environment (DATABASE_URL etc.)
    - Migrations applied (alembic upgrade head)
"""

import sys
import argparse
import asyncio
from dotenv import load_dotenv
from scripts.db import seed_db, DEFAULT_DATA_TEMPLATE
from app.db import DbManager
from common.config import DatabaseConfig, get_config, initialize_config
from common.api_error import ConfigurationError


async def run_seed_db(
    _db_config: DatabaseConfig,
    records: int,
    start_index: int,
    only: list[str],
):
    """
    Example:
        >>> asyncio.run(run_seed_db(db_cfg, records=20, start_index=0, only=[]))
    """
    template = {
        table: DEFAULT_DATA_TEMPLATE[table]
        for table in (only or DEFAULT_DATA_TEMPLATE)
    }

    db_manager = DbManager.from_config(_db_config)
    await db_manager.verify_connection()
    try:
        seeded = await seed_db(
            db_manager=db_manager,
            data_template=template,
            records=records,
            start_index=start_index,
        )
    finally:
        await db_manager.dispose()

    for table, rows in seeded.items():
        print(f"{table}: {len(rows)} inserted")


def main():
    parser = argparse.ArgumentParser(description="Seed the booking database")
    parser.add_argument(
        "--records",
        type=int,
        required=True,
        help="Number of records to insert per table (REQUIRED)",
    )
    parser.add_argument(
        "--start-index",
        type=int,
        default=0,
        help="First record index; emails are derived from it",
    )
    parser.add_argument(
        "--only",
        action="append",
        choices=sorted(DEFAULT_DATA_TEMPLATE),
        default=[],
        help="Seed only this table (repeatable)",
    )

    args = parser.parse_args()

    _db_config = get_config().database
    if _db_config is None:
        print("FATAL: DATABASE_URL is required for seeding")
        sys.exit(1)

    asyncio.run(run_seed_db(_db_config, args.records, args.start_index, args.only))


if __name__ == "__main__":
    try:
        load_dotenv()
        initialize_config()
    except ConfigurationError as e:
        print(f"FATAL: Configuration error:\n{e}")
        sys.exit(1)
    main()
