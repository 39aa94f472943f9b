# app/domain/appointment_lifecycle.py
"""
Appointment status state machine.

    pending  -> approved | declined | cancelled
    approved -> completed | cancelled

declined, completed and cancelled are terminal. Nothing returns to
pending and terminal states are never reopened.
"""

from enum import Enum
from typing import Optional
from common.api_error import InvalidTransitionError, PermissionDeniedError


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self]


class AppointmentType(str, Enum):
    CONSULTATION = "consultation"
    FOLLOW_UP = "follow-up"
    EMERGENCY = "emergency"


ALLOWED_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset(
        {
            AppointmentStatus.APPROVED,
            AppointmentStatus.DECLINED,
            AppointmentStatus.CANCELLED,
        }
    ),
    AppointmentStatus.APPROVED: frozenset(
        {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED}
    ),
    AppointmentStatus.DECLINED: frozenset(),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
}

# Statuses that hold a doctor's slot
ACTIVE_STATUSES = frozenset({AppointmentStatus.PENDING, AppointmentStatus.APPROVED})

# Only the appointment's doctor may decide or close an appointment
DOCTOR_DECISIONS = frozenset(
    {
        AppointmentStatus.APPROVED,
        AppointmentStatus.DECLINED,
        AppointmentStatus.COMPLETED,
    }
)


def can_transition(current: AppointmentStatus, target: AppointmentStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def ensure_transition_allowed(
    current: AppointmentStatus, target: AppointmentStatus
) -> None:
    if not can_transition(current, target):
        raise InvalidTransitionError(current.value, target.value)


def ensure_actor_may_transition(
    target: AppointmentStatus,
    *,
    actor_id: str,
    actor_role: str,
    doctor_id: str,
    patient_id: Optional[str],
) -> None:
    """
    Actor guard. Roles are passed as their string values so this module
    stays free of persistence types.
    """
    is_own_doctor = actor_role == "doctor" and actor_id == doctor_id

    if target in DOCTOR_DECISIONS:
        if not is_own_doctor:
            raise PermissionDeniedError(
                f"Only the appointment's doctor may mark it '{target.value}'"
            )
        return

    # Cancellation: either party, or the front desk
    is_own_patient = patient_id is not None and actor_id == patient_id
    if not (
        is_own_doctor or is_own_patient or actor_role == "front_desk_administrator"
    ):
        raise PermissionDeniedError(
            "Only the appointment's doctor, its patient or the front desk may cancel it"
        )


__all__ = [
    "AppointmentStatus",
    "AppointmentType",
    "ALLOWED_TRANSITIONS",
    "ACTIVE_STATUSES",
    "DOCTOR_DECISIONS",
    "can_transition",
    "ensure_transition_allowed",
    "ensure_actor_may_transition",
]
