"""Tests for commit-then-dispatch and error mapping in the unit of work."""

from datetime import datetime
from decimal import Decimal
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select, text
from sqlalchemy.exc import OperationalError

from app.application import create_app
from app.db import DbManager, UnitOfWork, get_unit_of_work
from app.db.models import (
    Appointment,
    AppointmentStatus,
    Doctor,
    MedicalSpecialty,
    User,
    UserRole,
)
from app.domain.availability import Availability, default_weekly_schedule
from app.domain.event_dispatcher import DomainEventsDispatcher
from app.domain.events import (
    AppointmentRequested,
    AppointmentStatusChanged,
    DoctorRegistered,
    DomainEvent,
    UserRegistered,
)
from common.api_error import ConflictError, PersistenceError
from common.config import AppConfig
from tests.conftest import patient_payload


def register_patient(email: str = "jane.doe@bookmd.org"):
    return User.register(
        email=email, first_name="Jane", last_name="Doe", role=UserRole.PATIENT
    )


def register_doctor():
    return Doctor.register(
        email="house@bookmd.org",
        first_name="Gregory",
        last_name="House",
        specialization=MedicalSpecialty.InfectiousDisease,
        consultation_fee=Decimal("150"),
        availability=Availability(True, default_weekly_schedule()),
    )


class TestSaveChanges:
    """Events reach subscribers only after a successful commit."""

    @pytest.mark.asyncio
    async def test_dispatches_after_commit(
        self,
        uow: UnitOfWork,
        db_manager: DbManager,
        dispatcher,
        published_events: list[DomainEvent],
    ):
        visible_to_handler: list[bool] = []

        async def check_committed(event: UserRegistered) -> None:
            async with db_manager.session() as session:
                found = await session.scalar(
                    select(User).where(User.user_id == event.user_id)
                )
                visible_to_handler.append(found is not None)

        dispatcher.subscribe(UserRegistered, check_committed)
        user, registered = register_patient()
        uow.add(user, registered)

        assert published_events == []

        written = await uow.save_changes()

        assert written == 1
        assert published_events == [registered]
        assert visible_to_handler == [True]
        assert uow.pending_events() == []

    @pytest.mark.asyncio
    async def test_events_keep_registration_order(
        self, uow: UnitOfWork, published_events: list[DomainEvent]
    ):
        doctor, doctor_events = register_doctor()
        user, registered = register_patient()
        uow.add(doctor, *doctor_events)
        uow.add(user, registered)

        await uow.save_changes()

        assert [type(e) for e in published_events] == [
            UserRegistered,
            DoctorRegistered,
            UserRegistered,
        ]
        assert published_events[0].role == "doctor"

    @pytest.mark.asyncio
    async def test_written_rows_include_children(self, uow: UnitOfWork):
        doctor, events = register_doctor()
        uow.add(doctor, *events)

        # users + doctors + one schedule row per weekday
        assert await uow.save_changes() == 9

    @pytest.mark.asyncio
    async def test_second_save_dispatches_nothing(
        self, uow: UnitOfWork, published_events: list[DomainEvent]
    ):
        user, registered = register_patient()
        uow.add(user, registered)
        await uow.save_changes()

        assert await uow.save_changes() == 0
        assert published_events == [registered]

    @pytest.mark.asyncio
    async def test_none_event_is_skipped(self, uow: UnitOfWork):
        user, _ = register_patient()
        uow.add(user, None)

        assert uow.pending_events(user) == []


class TestSaveChangesFailure:
    """A failed commit rolls back and keeps the buffered events."""

    @pytest.mark.asyncio
    async def test_duplicate_email_is_conflict(
        self, uow: UnitOfWork, published_events: list[DomainEvent]
    ):
        first, first_registered = register_patient()
        uow.add(first, first_registered)
        await uow.save_changes()

        duplicate, duplicate_registered = register_patient()
        uow.add(duplicate, duplicate_registered)

        with pytest.raises(ConflictError):
            await uow.save_changes()

        assert published_events == [first_registered]
        assert uow.pending_events(duplicate) == [duplicate_registered]

    @pytest.mark.asyncio
    async def test_stale_version_is_conflict(self, uow: UnitOfWork):
        doctor, events = register_doctor()
        uow.add(doctor, *events)
        appointment, requested = Appointment.book(
            doctor=doctor,
            patient_name="Jane Doe",
            patient_email="jane.doe@bookmd.org",
            preferred_time=datetime(2024, 6, 3, 11, 0),
        )
        uow.add(appointment, requested)
        await uow.save_changes()
        assert appointment.version == 1

        # Someone else moved the row on
        await uow.session.execute(
            text(
                "UPDATE appointments SET version = version + 1 "
                "WHERE appointment_id = :id"
            ),
            {"id": appointment.appointment_id},
        )

        changed = appointment.transition_to(
            AppointmentStatus.APPROVED, actor_id=doctor.doctor_id, actor_role="doctor"
        )
        uow.record(appointment, changed)

        with pytest.raises(ConflictError):
            await uow.save_changes()

        assert uow.pending_events(appointment) == [changed]

    @pytest.mark.asyncio
    async def test_booking_event_carries_fee_snapshot(
        self, uow: UnitOfWork, published_events: list[DomainEvent]
    ):
        doctor, events = register_doctor()
        uow.add(doctor, *events)
        appointment, requested = Appointment.book(
            doctor=doctor,
            patient_name="Jane Doe",
            patient_email="jane.doe@bookmd.org",
            preferred_time=datetime(2024, 6, 3, 11, 0),
        )
        uow.add(appointment, requested)
        await uow.save_changes()

        booked = [e for e in published_events if isinstance(e, AppointmentRequested)]
        assert booked[0].fee == Decimal("150.00")

    @pytest.mark.asyncio
    async def test_retry_after_duplicate_does_not_dispatch(
        self, uow: UnitOfWork, published_events: list[DomainEvent]
    ):
        first, first_registered = register_patient()
        uow.add(first, first_registered)
        await uow.save_changes()

        duplicate, duplicate_registered = register_patient()
        uow.add(duplicate, duplicate_registered)
        with pytest.raises(ConflictError):
            await uow.save_changes()

        with pytest.raises(PersistenceError):
            await uow.save_changes()

        assert uow.failed
        assert published_events == [first_registered]
        assert uow.pending_events(duplicate) == [duplicate_registered]
        assert await uow.users.get(duplicate.user_id) is None

    @pytest.mark.asyncio
    async def test_retry_after_stale_version_does_not_dispatch(
        self,
        uow: UnitOfWork,
        db_manager: DbManager,
        published_events: list[DomainEvent],
    ):
        doctor, events = register_doctor()
        uow.add(doctor, *events)
        appointment, requested = Appointment.book(
            doctor=doctor,
            patient_name="Jane Doe",
            patient_email="jane.doe@bookmd.org",
            preferred_time=datetime(2024, 6, 3, 11, 0),
        )
        uow.add(appointment, requested)
        await uow.save_changes()

        await uow.session.execute(
            text(
                "UPDATE appointments SET version = version + 1 "
                "WHERE appointment_id = :id"
            ),
            {"id": appointment.appointment_id},
        )
        changed = appointment.transition_to(
            AppointmentStatus.APPROVED, actor_id=doctor.doctor_id, actor_role="doctor"
        )
        uow.record(appointment, changed)
        with pytest.raises(ConflictError):
            await uow.save_changes()

        with pytest.raises(PersistenceError):
            await uow.save_changes()

        assert not any(isinstance(e, AppointmentStatusChanged) for e in published_events)
        async with db_manager.session() as session:
            status = await session.scalar(
                select(Appointment.status).where(
                    Appointment.appointment_id == appointment.appointment_id
                )
            )
        assert status == AppointmentStatus.PENDING

    @pytest.mark.asyncio
    async def test_storage_failure_is_persistence_error(
        self,
        uow: UnitOfWork,
        published_events: list[DomainEvent],
        monkeypatch: pytest.MonkeyPatch,
    ):
        async def commit_fails() -> None:
            raise OperationalError("COMMIT", None, Exception("database is locked"))

        user, registered = register_patient()
        uow.add(user, registered)
        monkeypatch.setattr(uow.session, "commit", commit_fails)

        with pytest.raises(PersistenceError) as excinfo:
            await uow.save_changes()

        assert excinfo.value.status_code == 503
        assert excinfo.value.retryable
        assert published_events == []
        assert uow.pending_events(user) == [registered]


class TestStorageFailureResponse:
    """A storage outage reaches the client as a retryable 503."""

    @pytest.mark.asyncio
    async def test_commit_failure_renders_503_envelope(
        self,
        app_config: AppConfig,
        db_manager: DbManager,
        dispatcher: DomainEventsDispatcher,
        published_events: list[DomainEvent],
    ):
        app = create_app(app_config, db_manager=db_manager, event_dispatcher=dispatcher)

        async def unit_of_work_with_broken_commit() -> AsyncGenerator[UnitOfWork, None]:
            async with db_manager.session(autocommit=False) as session:

                async def commit_fails() -> None:
                    raise OperationalError("COMMIT", None, Exception("disk I/O error"))

                session.commit = commit_fails
                yield UnitOfWork(session, dispatcher)

        app.dependency_overrides[get_unit_of_work] = unit_of_work_with_broken_commit
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post("/users", json=patient_payload())

        assert response.status_code == 503
        body = response.json()
        assert body["error"] == "PERSISTENCE_ERROR"
        assert "timestamp" in body
        assert published_events == []
