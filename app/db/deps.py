# app/db/deps.py
"""
FastAPI dependencies. Everything is read from app.state so several app
instances (one per test) can live in one process.
"""

from fastapi import Request
from typing import AsyncGenerator
from common import BookingConfig
from app.domain.event_dispatcher import DomainEventsDispatcher
from .db_manager import DbManager
from .unit_of_work import UnitOfWork


def get_db_manager(request: Request) -> DbManager:
    manager = getattr(request.app.state, "db_manager", None)
    if manager is None:
        # Lifespan did not run and no manager was handed to create_app()
        raise RuntimeError(
            "DbManager not found in app.state. Ensure lifespan is configured."
        )
    return manager


def get_event_dispatcher(request: Request) -> DomainEventsDispatcher:
    dispatcher = getattr(request.app.state, "event_dispatcher", None)
    if dispatcher is None:
        raise RuntimeError("DomainEventsDispatcher not found in app.state.")
    return dispatcher


def get_booking_config(request: Request) -> BookingConfig:
    return getattr(request.app.state, "booking_config", None) or BookingConfig()


async def get_unit_of_work(request: Request) -> AsyncGenerator[UnitOfWork, None]:
    """
    One unit of work per request. Handlers commit through save_changes();
    anything not saved is rolled back when the request ends.
    """
    manager = get_db_manager(request)
    async with manager.session(autocommit=False) as session:
        yield UnitOfWork(session, get_event_dispatcher(request))


__all__ = [
    "get_db_manager",
    "get_event_dispatcher",
    "get_booking_config",
    "get_unit_of_work",
]
