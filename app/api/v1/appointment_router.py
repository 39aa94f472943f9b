# app/api/v1/appointment_router.py
from typing import Optional
from fastapi import APIRouter, Depends, Header, Query, Response, status
from common import BookingConfig
from app.db import UnitOfWork, get_booking_config, get_unit_of_work
from app.db.models import AppointmentStatus, UserRole
from app.db.schemas import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentStatusUpdate,
)
from app.services.v1 import AppointmentService

appointment_router = APIRouter(
    prefix="/appointments",
    tags=["Appointments"],
)


def get_appointment_service(
    uow: UnitOfWork = Depends(get_unit_of_work),
    booking: BookingConfig = Depends(get_booking_config),
) -> AppointmentService:
    return AppointmentService(uow, booking)


@appointment_router.get(
    "",
    response_model=list[AppointmentResponse],
    summary="List appointments for a user",
    responses={
        403: {"description": "Role does not match the user"},
        404: {"description": "User not found"},
    },
)
async def list_appointments(
    user_id: str = Query(...),
    role: UserRole = Query(...),
    status_filter: Optional[AppointmentStatus] = Query(None, alias="status"),
    service: AppointmentService = Depends(get_appointment_service),
):
    return await service.list_appointments(user_id, role, status_filter)


@appointment_router.post(
    "",
    response_model=AppointmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book an appointment",
    description="""
    Creates a `pending` appointment with the doctor's current fee.

    Send an `Idempotency-Key` header to make retries safe: a repeated key
    returns the original appointment with 200 instead of booking twice.
    """,
    responses={
        200: {"description": "Replay of an earlier request with the same key"},
        404: {"description": "Doctor or patient not found"},
        409: {"description": "Slot unavailable or already booked"},
    },
)
async def book_appointment(
    data: AppointmentCreate,
    response: Response,
    idempotency_key: Optional[str] = Header(None, max_length=128),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment, created = await service.book(data, idempotency_key)
    if not created:
        response.status_code = status.HTTP_200_OK
    return appointment


@appointment_router.get(
    "/{appointment_id}",
    response_model=AppointmentResponse,
    summary="Get appointment",
    responses={404: {"description": "Appointment not found"}},
)
async def get_appointment(
    appointment_id: str,
    service: AppointmentService = Depends(get_appointment_service),
):
    return await service.get_appointment(appointment_id)


@appointment_router.patch(
    "/{appointment_id}/status",
    response_model=AppointmentResponse,
    summary="Change appointment status",
    description="""
    pending -> approved | declined | cancelled, approved -> completed | cancelled.

    Only the appointment's doctor approves, declines or completes; the doctor,
    the patient or the front desk may cancel.
    """,
    responses={
        403: {"description": "Actor may not take this transition"},
        404: {"description": "Appointment or actor not found"},
        409: {"description": "Invalid transition or stale version"},
    },
)
async def change_status(
    appointment_id: str,
    data: AppointmentStatusUpdate,
    service: AppointmentService = Depends(get_appointment_service),
):
    return await service.change_status(appointment_id, data)


__all__ = ["appointment_router"]
