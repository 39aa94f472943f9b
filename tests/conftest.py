"""Shared test fixtures for the booking backend tests."""

import logging
from typing import Any, AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr

from app.application import create_app
from app.db import DbManager, UnitOfWork
from app.db.models import DbBaseModel
from app.domain.event_dispatcher import DomainEventsDispatcher, create_default_dispatcher
from app.domain.events import DomainEvent
from common.config import (
    AppConfig,
    BookingConfig,
    DatabaseConfig,
    EnvLogLevel,
    LoggingConfig,
    configure_structlog,
)

configure_structlog(logging.WARNING)

IN_MEMORY_URL = "sqlite+aiosqlite://"


@pytest.fixture
def booking_config() -> BookingConfig:
    return BookingConfig()


@pytest.fixture
def app_config(booking_config: BookingConfig) -> AppConfig:
    return AppConfig(
        app_title="BookMD",
        app_version="1.0.0",
        environment="development",
        logging=LoggingConfig(log_level=EnvLogLevel.WARNING),
        database=DatabaseConfig(url=SecretStr(IN_MEMORY_URL)),
        booking=booking_config,
    )


@pytest.fixture
def published_events() -> list[DomainEvent]:
    """Every event the dispatcher delivered, in delivery order."""
    return []


@pytest.fixture
def dispatcher(published_events: list[DomainEvent]) -> DomainEventsDispatcher:
    dispatcher = create_default_dispatcher()

    async def collect(event: DomainEvent) -> None:
        published_events.append(event)

    dispatcher.subscribe(DomainEvent, collect)
    return dispatcher


@pytest_asyncio.fixture
async def db_manager() -> AsyncGenerator[DbManager, None]:
    """Fresh in-memory database with every table created."""
    manager = DbManager(IN_MEMORY_URL)
    async with manager.engine.begin() as conn:
        await conn.run_sync(DbBaseModel.metadata.create_all)
    yield manager
    await manager.dispose()


@pytest_asyncio.fixture
async def uow(
    db_manager: DbManager, dispatcher: DomainEventsDispatcher
) -> AsyncGenerator[UnitOfWork, None]:
    async with db_manager.session(autocommit=False) as session:
        yield UnitOfWork(session, dispatcher)


@pytest_asyncio.fixture
async def client(
    app_config: AppConfig,
    db_manager: DbManager,
    dispatcher: DomainEventsDispatcher,
) -> AsyncGenerator[AsyncClient, None]:
    app = create_app(app_config, db_manager=db_manager, event_dispatcher=dispatcher)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def doctor_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "email": "grey@bookmd.org",
        "first_name": "Meredith",
        "last_name": "Grey",
        "specialization": "GeneralSurgery",
        "consultation_fee": "150.00",
        "qualifications": ["MD", "FACS"],
        "years_of_experience": 12,
    }
    payload.update(overrides)
    return payload


def patient_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "email": "jane.doe@bookmd.org",
        "first_name": "Jane",
        "last_name": "Doe",
        "role": "patient",
        "phone": "555-0101",
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture
async def doctor(client: AsyncClient) -> dict[str, Any]:
    """A registered doctor on the default Monday-Friday 09:00-17:00 schedule."""
    response = await client.post("/doctors", json=doctor_payload())
    assert response.status_code == 201, response.text
    return response.json()


@pytest_asyncio.fixture
async def patient(client: AsyncClient) -> dict[str, Any]:
    response = await client.post("/users", json=patient_payload())
    assert response.status_code == 201, response.text
    return response.json()
