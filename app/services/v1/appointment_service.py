# app/services/v1/appointment_service.py
from typing import Optional
from common import BookingConfig
from common.api_error import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    SlotUnavailableError,
)
from common.logger import get_app_logger
from app.domain.appointment_lifecycle import ACTIVE_STATUSES
from app.domain.availability import unbookable_reason
from app.db.models import Appointment, AppointmentStatus, UserRole
from app.db.schemas import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentStatusUpdate,
)
from app.db.unit_of_work import UnitOfWork
from .doctor_service import require_doctor
from .user_service import require_user

logger = get_app_logger(__name__)


class AppointmentService:
    def __init__(self, uow: UnitOfWork, booking: Optional[BookingConfig] = None):
        self.uow = uow
        self.booking = booking or BookingConfig()

    async def book(
        self,
        data: AppointmentCreate,
        idempotency_key: Optional[str] = None,
    ) -> tuple[AppointmentResponse, bool]:
        """
        Book a pending appointment.

        Returns the appointment and whether it was created by this call.
        A repeated idempotency key returns the original appointment without
        writing anything or raising an event.
        """
        if idempotency_key:
            existing = await self._by_idempotency_key(idempotency_key)
            if existing is not None:
                return self._replay(existing, data), False

        doctor = await require_doctor(self.uow, data.doctor_id)
        if data.patient_id is not None:
            await require_user(self.uow, data.patient_id, entity="Patient")

        if self.booking.enforce_availability:
            reason = unbookable_reason(doctor.availability(), data.preferred_time)
            if reason is not None:
                raise SlotUnavailableError(
                    f"{doctor.display_name} cannot be booked at "
                    f"{data.preferred_time.isoformat()}: {reason}"
                )

        if self.booking.reject_double_booking:
            clash = await self.uow.appointments.first(
                Appointment.doctor_id == doctor.doctor_id,
                Appointment.preferred_time == data.preferred_time,
                Appointment.status.in_(ACTIVE_STATUSES),
            )
            if clash is not None:
                raise ConflictError(
                    f"{doctor.display_name} already has an appointment at "
                    f"{data.preferred_time.isoformat()}",
                    code="DOUBLE_BOOKING",
                )

        appointment, requested = Appointment.book(
            doctor=doctor,
            patient_id=data.patient_id,
            patient_name=data.patient_name,
            patient_email=data.patient_email,
            symptoms=data.symptoms,
            preferred_time=data.preferred_time,
            type=data.type,
            idempotency_key=idempotency_key,
        )
        self.uow.add(appointment, requested)

        try:
            await self.uow.save_changes()
        except ConflictError:
            # Lost a race against a concurrent request with the same key
            if idempotency_key:
                existing = await self._by_idempotency_key(idempotency_key)
                if existing is not None:
                    return self._replay(existing, data), False
            raise

        logger.info(
            "Appointment requested",
            appointment_id=appointment.appointment_id,
            doctor_id=appointment.doctor_id,
            fee=str(appointment.fee),
        )
        return AppointmentResponse.model_validate(appointment), True

    async def list_appointments(
        self,
        user_id: str,
        role: UserRole,
        status: Optional[AppointmentStatus] = None,
    ) -> list[AppointmentResponse]:
        """
        Appointments visible to a user in the given role:
        doctors see their own calendar, patients and visitors their own
        bookings, the front desk everything.
        """
        user = await require_user(self.uow, user_id)
        if user.role != role:
            raise PermissionDeniedError(f"User '{user_id}' is not a {role.value}")

        criteria = []
        if role == UserRole.DOCTOR:
            criteria.append(Appointment.doctor_id == user_id)
        elif role in (UserRole.PATIENT, UserRole.VISITOR):
            criteria.append(Appointment.patient_id == user_id)
        elif role != UserRole.FRONT_DESK_ADMINISTRATOR:
            raise PermissionDeniedError(f"Role '{role.value}' cannot list appointments")

        if status is not None:
            criteria.append(Appointment.status == status)

        appointments = await self.uow.appointments.find(
            *criteria,
            order_by=[Appointment.preferred_time, Appointment.created_at],
        )
        return [AppointmentResponse.model_validate(a) for a in appointments]

    async def get_appointment(self, appointment_id: str) -> AppointmentResponse:
        return AppointmentResponse.model_validate(
            await self._require_appointment(appointment_id)
        )

    async def change_status(
        self, appointment_id: str, data: AppointmentStatusUpdate
    ) -> AppointmentResponse:
        appointment = await self._require_appointment(appointment_id)
        actor = await require_user(self.uow, data.actor_id)

        if (
            data.expected_version is not None
            and data.expected_version != appointment.version
        ):
            raise ConflictError(
                f"Appointment '{appointment_id}' is at version {appointment.version}, "
                f"not {data.expected_version}; reload and retry",
                code="STALE_VERSION",
            )

        # Looked up before the transition so the query does not autoflush it
        first_visit = (
            data.status == AppointmentStatus.COMPLETED
            and not await self._has_completed_visit(appointment)
        )

        changed = appointment.transition_to(
            data.status,
            actor_id=actor.user_id,
            actor_role=actor.role.value,
            actual_time=data.actual_time,
            notes=data.notes,
        )
        self.uow.record(appointment, changed)

        if first_visit:
            doctor = await require_doctor(self.uow, appointment.doctor_id)
            doctor.total_patients += 1

        await self.uow.save_changes()

        logger.bind(appointment_id=appointment_id, actor_id=actor.user_id).info(
            "Appointment status changed",
            previous_status=changed.previous_status,
            new_status=changed.new_status,
            version=appointment.version,
        )
        return AppointmentResponse.model_validate(appointment)

    async def _require_appointment(self, appointment_id: str) -> Appointment:
        appointment = await self.uow.appointments.get(appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment", appointment_id)
        return appointment

    async def _has_completed_visit(self, appointment: Appointment) -> bool:
        """Whether the doctor already completed a visit with this patient."""
        if appointment.patient_id is not None:
            same_patient = Appointment.patient_id == appointment.patient_id
        else:
            same_patient = Appointment.patient_email == appointment.patient_email
        previous = await self.uow.appointments.first(
            Appointment.doctor_id == appointment.doctor_id,
            same_patient,
            Appointment.status == AppointmentStatus.COMPLETED,
            Appointment.appointment_id != appointment.appointment_id,
        )
        return previous is not None

    async def _by_idempotency_key(self, key: str) -> Optional[Appointment]:
        return await self.uow.appointments.first(Appointment.idempotency_key == key)

    @staticmethod
    def _replay(existing: Appointment, data: AppointmentCreate) -> AppointmentResponse:
        if (
            existing.doctor_id != data.doctor_id
            or existing.patient_email != data.patient_email
        ):
            raise ConflictError(
                "Idempotency-Key was already used for a different booking",
                code="IDEMPOTENCY_KEY_REUSED",
            )
        return AppointmentResponse.model_validate(existing)


__all__ = ["AppointmentService"]
