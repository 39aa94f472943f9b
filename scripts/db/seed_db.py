# scripts/db/seed_db.py
"""
Seed the database through the same services the API uses, so every
seeded row goes through validation and raises its domain events.
"""

from typing import Any, Optional
from app.db import DbManager, UnitOfWork
from app.db.schemas import DoctorCreate, UserCreate, UserDto
from app.domain.event_dispatcher import DomainEventsDispatcher, create_default_dispatcher
from app.services.v1 import DoctorService, UserService
from common.logger import get_app_logger

logger = get_app_logger(__name__)


async def _seed_doctors(uow: UnitOfWork, records: list[DoctorCreate]) -> list[UserDto]:
    service = DoctorService(uow)
    return [await service.create_doctor(record) for record in records]


async def _seed_patients(uow: UnitOfWork, records: list[UserCreate]) -> list[UserDto]:
    service = UserService(uow)
    return [await service.register_user(record) for record in records]


SCHEMA_MAP = {
    "doctors": DoctorCreate,
    "patients": UserCreate,
}

SEEDER_MAP = {
    "doctors": _seed_doctors,
    "patients": _seed_patients,
}


async def seed_db(
    db_manager: DbManager,
    data_template: dict[str, dict[str, Any]],
    records: int,
    start_index: int = 0,
    dispatcher: Optional[DomainEventsDispatcher] = None,
) -> dict[str, list[UserDto]]:
    """
    Seed database with generated records.

    Args:
        db_manager: Initialized DbManager instance
        data_template: Dict mapping table names to template dicts
        records: Number of records to generate per table
        start_index: Starting index for record generation (keeps emails unique
            across runs)
        dispatcher: Event dispatcher; defaults to the logging dispatcher

    Returns:
        Dict mapping table names to the created users
    """
    dispatcher = dispatcher or create_default_dispatcher()
    seeded: dict[str, list[UserDto]] = {}

    for table, template in data_template.items():
        schema_cls = SCHEMA_MAP[table]
        schema_records = schema_cls.seed_records(template, records, start_index)

        async with db_manager.session(autocommit=False) as session:
            uow = UnitOfWork(session, dispatcher)
            seeded[table] = await SEEDER_MAP[table](uow, schema_records)

        logger.info("Seeded table", table=table, records=len(seeded[table]))

    return seeded


__all__ = ["seed_db", "SCHEMA_MAP"]
