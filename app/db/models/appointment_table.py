# app/db/models/appointment_table.py
from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional
from sqlalchemy import (
    String,
    Integer,
    Numeric,
    DateTime,
    ForeignKey,
    Text,
    Index,
    Enum as sqlalchemy_Enum,
)
from sqlalchemy.orm import Mapped, mapped_column
from app.domain.appointment_lifecycle import (
    AppointmentStatus,
    AppointmentType,
    ensure_transition_allowed,
    ensure_actor_may_transition,
)
from app.domain.events import AppointmentRequested, AppointmentStatusChanged
from .db_base_model import DbBaseModel, utc_now
from .user_table import enum_values

if TYPE_CHECKING:
    from .doctor_table import Doctor


class Appointment(DbBaseModel):
    __tablename__ = "appointments"
    __table_args__ = (
        Index("ix_appointments_doctor_slot", "doctor_id", "preferred_time"),
    )

    appointment_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=DbBaseModel.generate_uuid,
    )

    doctor_id: Mapped[str] = mapped_column(
        ForeignKey("doctors.doctor_id"),
        nullable=False,
    )

    # Visitors may book without an account
    patient_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("users.user_id"),
        nullable=True,
        index=True,
    )
    patient_name: Mapped[str] = mapped_column(String(200), nullable=False)
    patient_email: Mapped[str] = mapped_column(String(254), nullable=False)
    symptoms: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Wall clock of the practice, stored without an offset
    preferred_time: Mapped[datetime] = mapped_column(
        DateTime(), nullable=False
    )
    actual_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(), nullable=True
    )

    status: Mapped[AppointmentStatus] = mapped_column(
        sqlalchemy_Enum(
            AppointmentStatus,
            name="appointment_status",
            native_enum=False,
            length=20,
            values_callable=enum_values,
        ),
        nullable=False,
        default=AppointmentStatus.PENDING,
    )
    type: Mapped[AppointmentType] = mapped_column(
        sqlalchemy_Enum(
            AppointmentType,
            name="appointment_type",
            native_enum=False,
            length=20,
            values_callable=enum_values,
        ),
        nullable=False,
        default=AppointmentType.CONSULTATION,
    )

    # Snapshot of the doctor's fee at booking time
    fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    idempotency_key: Mapped[Optional[str]] = mapped_column(
        String(128), nullable=True, unique=True
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    @classmethod
    def book(
        cls,
        *,
        doctor: "Doctor",
        patient_name: str,
        patient_email: str,
        preferred_time: datetime,
        symptoms: str = "",
        type: AppointmentType = AppointmentType.CONSULTATION,
        patient_id: Optional[str] = None,
        idempotency_key: Optional[str] = None,
        at: Optional[datetime] = None,
    ) -> tuple["Appointment", AppointmentRequested]:
        now = at or utc_now()
        appointment = cls(
            appointment_id=cls.generate_uuid(),
            doctor_id=doctor.doctor_id,
            patient_id=patient_id,
            patient_name=patient_name,
            patient_email=patient_email,
            symptoms=symptoms,
            preferred_time=preferred_time,
            status=AppointmentStatus.PENDING,
            type=type,
            fee=doctor.consultation_fee,
            idempotency_key=idempotency_key,
            created_at=now,
            updated_at=now,
        )
        return appointment, AppointmentRequested(
            appointment_id=appointment.appointment_id,
            doctor_id=appointment.doctor_id,
            patient_id=patient_id,
            preferred_time=preferred_time,
            fee=appointment.fee,
            occurred_at=now,
        )

    def transition_to(
        self,
        target: AppointmentStatus,
        *,
        actor_id: str,
        actor_role: str,
        actual_time: Optional[datetime] = None,
        notes: Optional[str] = None,
        at: Optional[datetime] = None,
    ) -> AppointmentStatusChanged:
        """
        Move to `target` on behalf of an actor.

        Raises InvalidTransitionError for an edge outside the state machine
        and PermissionDeniedError when the actor may not take it.
        """
        ensure_transition_allowed(self.status, target)
        ensure_actor_may_transition(
            target,
            actor_id=actor_id,
            actor_role=actor_role,
            doctor_id=self.doctor_id,
            patient_id=self.patient_id,
        )

        previous = self.status
        now = at or utc_now()

        self.status = target
        if target == AppointmentStatus.APPROVED:
            self.actual_time = actual_time or self.preferred_time
        elif actual_time is not None:
            self.actual_time = actual_time
        if notes is not None:
            self.notes = notes
        self.updated_at = now

        return AppointmentStatusChanged(
            appointment_id=self.appointment_id,
            doctor_id=self.doctor_id,
            patient_id=self.patient_id,
            previous_status=previous.value,
            new_status=target.value,
            actor_id=actor_id,
            occurred_at=now,
        )


__all__ = ["Appointment", "AppointmentStatus", "AppointmentType"]
