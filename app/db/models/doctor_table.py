# app/db/models/doctor_table.py
from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from sqlalchemy import (
    String,
    Integer,
    Float,
    Numeric,
    Boolean,
    JSON,
    ForeignKey,
    Enum as sqlalchemy_Enum,
)
from sqlalchemy.orm import relationship, Mapped, mapped_column, validates
from app.domain.availability import Availability, DayWindow, BreakWindow
from app.domain.events import (
    DomainEvent,
    DoctorRegistered,
    DoctorProfileUpdated,
    DoctorAvailabilityUpdated,
)
from .db_base_model import DbBaseModel, utc_now
from .medical_specialty import MedicalSpecialty
from .schedules import WeeklySchedule, ScheduleBreak
from .user_table import User, UserRole, enum_values

DOCTOR_PROFILE_FIELDS = ("consultation_fee", "qualifications", "years_of_experience")


class Doctor(DbBaseModel):
    """
    Doctor payload of a user whose role is 'doctor'.

    Keyed by the user's id; the identity fields live on the users row
    and are exposed here as read-only properties.
    """

    __tablename__ = "doctors"

    doctor_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        primary_key=True,
    )

    # Doctors are partitioned by specialization
    specialization: Mapped[MedicalSpecialty] = mapped_column(
        sqlalchemy_Enum(
            MedicalSpecialty,
            name="medical_specialty",
            native_enum=False,
            length=60,
            values_callable=enum_values,
        ),
        nullable=False,
        index=True,
    )

    consultation_fee: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0")
    )
    qualifications: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list
    )
    years_of_experience: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_patients: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Accepting new appointments at all
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    user: Mapped[User] = relationship(User, lazy="joined", innerjoin=True)

    weekly_schedule: Mapped[list[WeeklySchedule]] = relationship(
        WeeklySchedule,
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by=WeeklySchedule.day_of_week,
    )
    breaks: Mapped[list[ScheduleBreak]] = relationship(
        ScheduleBreak,
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by=(ScheduleBreak.break_date, ScheduleBreak.start_time),
    )

    @validates("specialization")
    def _validate_specialization(self, key: str, value: Any) -> MedicalSpecialty:
        if value is None:
            raise ValueError("A doctor's specialization is required")
        return MedicalSpecialty(value)

    @validates("consultation_fee")
    def _validate_fee(self, key: str, value: Any) -> Decimal:
        fee = Decimal(str(value))
        if fee < 0:
            raise ValueError("Consultation fee cannot be negative")
        return fee.quantize(Decimal("0.01"))

    @classmethod
    def register(
        cls,
        *,
        email: str,
        first_name: str,
        last_name: str,
        specialization: MedicalSpecialty,
        consultation_fee: Decimal,
        availability: Availability,
        qualifications: Optional[list[str]] = None,
        years_of_experience: int = 0,
        phone: Optional[str] = None,
        at: Optional[datetime] = None,
    ) -> tuple["Doctor", list[DomainEvent]]:
        now = at or utc_now()
        user, registered = User.register(
            email=email,
            first_name=first_name,
            last_name=last_name,
            role=UserRole.DOCTOR,
            phone=phone,
            at=now,
        )
        doctor = cls(
            doctor_id=user.user_id,
            specialization=specialization,
            consultation_fee=consultation_fee,
            qualifications=list(qualifications or []),
            years_of_experience=years_of_experience,
            rating=0.0,
            total_patients=0,
            is_available=availability.is_available,
            weekly_schedule=[],
            breaks=[],
            created_at=now,
            updated_at=now,
        )
        doctor.user = user
        doctor._apply_availability(availability)

        return doctor, [
            registered,
            DoctorRegistered(
                doctor_id=doctor.doctor_id,
                specialization=doctor.specialization.value,
                consultation_fee=doctor.consultation_fee,
                occurred_at=now,
            ),
        ]

    @property
    def email(self) -> str:
        return self.user.email

    @property
    def first_name(self) -> str:
        return self.user.first_name

    @property
    def last_name(self) -> str:
        return self.user.last_name

    @property
    def display_name(self) -> str:
        return self.user.display_name

    def availability(self) -> Availability:
        return Availability(
            is_available=self.is_available,
            schedule={
                row.day_of_week: DayWindow(row.start_time, row.end_time, row.is_available)
                for row in self.weekly_schedule
            },
            breaks=tuple(
                BreakWindow(b.break_date, b.start_time, b.end_time, b.reason)
                for b in self.breaks
            ),
        )

    def _apply_availability(self, availability: Availability) -> None:
        self.is_available = availability.is_available

        # Weekday rows are updated in place; (doctor_id, day_of_week) is unique
        # and a delete-then-insert would be flushed in the wrong order.
        existing = {row.day_of_week: row for row in self.weekly_schedule}
        for day, window in availability.schedule.items():
            row = existing.pop(day, None)
            if row is None:
                self.weekly_schedule.append(
                    WeeklySchedule(
                        schedule_id=self.generate_uuid(),
                        day_of_week=day,
                        start_time=window.start,
                        end_time=window.end,
                        is_available=window.is_available,
                    )
                )
                continue
            row.start_time = window.start
            row.end_time = window.end
            row.is_available = window.is_available
        for row in existing.values():
            self.weekly_schedule.remove(row)

        self.breaks = [
            ScheduleBreak(
                break_id=self.generate_uuid(),
                break_date=b.on,
                start_time=b.start,
                end_time=b.end,
                reason=b.reason,
            )
            for b in availability.breaks
        ]

    def replace_availability(
        self, availability: Availability, at: Optional[datetime] = None
    ) -> DoctorAvailabilityUpdated:
        now = at or utc_now()
        self._apply_availability(availability)
        self.updated_at = now
        return DoctorAvailabilityUpdated(
            doctor_id=self.doctor_id,
            is_available=self.is_available,
            occurred_at=now,
        )

    def update_profile(
        self, changes: dict[str, Any], at: Optional[datetime] = None
    ) -> Optional[DoctorProfileUpdated]:
        changed: list[str] = []
        for field in DOCTOR_PROFILE_FIELDS:
            if field in changes and getattr(self, field) != changes[field]:
                value = changes[field]
                setattr(self, field, list(value) if field == "qualifications" else value)
                changed.append(field)

        if not changed:
            return None

        now = at or utc_now()
        self.updated_at = now
        return DoctorProfileUpdated(
            doctor_id=self.doctor_id,
            changed_fields=tuple(changed),
            occurred_at=now,
        )


__all__ = ["Doctor", "DOCTOR_PROFILE_FIELDS"]
