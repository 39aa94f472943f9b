# app/domain/events.py
"""
Domain events: facts raised by entity mutations.

Entities return events from their mutating methods; the unit of work
buffers them and dispatches them only after the surrounding write commits.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    occurred_at: datetime = field(default_factory=_utc_now)

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_log_dict(self) -> dict[str, Any]:
        data = asdict(self)
        return {
            key: (
                value.isoformat()
                if isinstance(value, datetime)
                else str(value) if isinstance(value, Decimal) else value
            )
            for key, value in data.items()
        }


@dataclass(frozen=True, kw_only=True)
class UserRegistered(DomainEvent):
    user_id: str
    email: str
    role: str


@dataclass(frozen=True, kw_only=True)
class UserProfileUpdated(DomainEvent):
    user_id: str
    changed_fields: tuple[str, ...]


@dataclass(frozen=True, kw_only=True)
class DoctorRegistered(DomainEvent):
    doctor_id: str
    specialization: str
    consultation_fee: Decimal


@dataclass(frozen=True, kw_only=True)
class DoctorProfileUpdated(DomainEvent):
    doctor_id: str
    changed_fields: tuple[str, ...]


@dataclass(frozen=True, kw_only=True)
class DoctorAvailabilityUpdated(DomainEvent):
    doctor_id: str
    is_available: bool


@dataclass(frozen=True, kw_only=True)
class AppointmentRequested(DomainEvent):
    appointment_id: str
    doctor_id: str
    patient_id: Optional[str]
    preferred_time: datetime
    fee: Decimal


@dataclass(frozen=True, kw_only=True)
class AppointmentStatusChanged(DomainEvent):
    appointment_id: str
    doctor_id: str
    patient_id: Optional[str]
    previous_status: str
    new_status: str
    actor_id: str


@dataclass(frozen=True, kw_only=True)
class MedicalRecordAdded(DomainEvent):
    record_id: str
    patient_id: str
    record_type: str


@dataclass(frozen=True, kw_only=True)
class ChatMessageSent(DomainEvent):
    message_id: str
    sender_id: str
    receiver_id: str


__all__ = [
    "DomainEvent",
    "UserRegistered",
    "UserProfileUpdated",
    "DoctorRegistered",
    "DoctorProfileUpdated",
    "DoctorAvailabilityUpdated",
    "AppointmentRequested",
    "AppointmentStatusChanged",
    "MedicalRecordAdded",
    "ChatMessageSent",
]
