# app/api/v1/doctor_router.py
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from app.db import UnitOfWork, get_unit_of_work
from app.db.models import MedicalSpecialty
from app.db.schemas import (
    AvailabilitySchema,
    BookabilityResponse,
    DoctorCreate,
    DoctorResponse,
    DoctorUpdate,
    SpecialtyResponse,
    UserDto,
)
from common.logger.logger_middleware import enable_perf_headers
from app.services.v1 import DoctorService

doctor_router = APIRouter(
    prefix="/doctors",
    tags=["Doctors"],
)


@doctor_router.post(
    "",
    response_model=UserDto,
    status_code=status.HTTP_201_CREATED,
    summary="Register a doctor",
    description="""
    Creates the user (role `doctor`) and its doctor profile in one commit.
    Without an explicit availability the doctor works Monday to Friday, 09:00-17:00.
    """,
    responses={409: {"description": "Email already registered"}},
)
async def create_doctor(data: DoctorCreate, uow: UnitOfWork = Depends(get_unit_of_work)):
    return await DoctorService(uow).create_doctor(data)


@doctor_router.get(
    "",
    response_model=list[DoctorResponse],
    dependencies=[Depends(enable_perf_headers)],
    summary="List doctors",
    description="""
    **Database Impact:** - One SELECT joined with `users`,
    plus one SELECT each for weekly schedules and breaks.
    - Expected Query Count: 3
    """,
)
async def list_doctors(
    specialization: Optional[MedicalSpecialty] = Query(None),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return await DoctorService(uow).list_doctors(specialization)


# Declared before /{doctor_id} so "specialties" is not read as an id
@doctor_router.get(
    "/specialties",
    response_model=list[SpecialtyResponse],
    summary="List medical specialties",
)
async def list_specialties():
    return DoctorService.list_specialties()


@doctor_router.get(
    "/{doctor_id}",
    response_model=DoctorResponse,
    summary="Get doctor details",
    responses={404: {"description": "Doctor not found"}},
)
async def get_doctor(doctor_id: str, uow: UnitOfWork = Depends(get_unit_of_work)):
    return await DoctorService(uow).get_doctor(doctor_id)


@doctor_router.patch(
    "/{doctor_id}",
    response_model=DoctorResponse,
    summary="Update doctor profile",
    responses={404: {"description": "Doctor not found"}},
)
async def update_doctor(
    doctor_id: str,
    data: DoctorUpdate,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return await DoctorService(uow).update_doctor(doctor_id, data)


@doctor_router.put(
    "/{doctor_id}/availability",
    response_model=DoctorResponse,
    summary="Replace doctor availability",
    responses={404: {"description": "Doctor not found"}},
)
async def update_availability(
    doctor_id: str,
    data: AvailabilitySchema,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return await DoctorService(uow).update_availability(doctor_id, data)


@doctor_router.get(
    "/{doctor_id}/bookable",
    response_model=BookabilityResponse,
    summary="Check whether a doctor can be booked at a time",
    description="The time is read on its own wall clock; no timezone conversion.",
    responses={404: {"description": "Doctor not found"}},
)
async def check_bookability(
    doctor_id: str,
    at: datetime = Query(..., description="Candidate slot, ISO 8601"),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return await DoctorService(uow).check_bookability(doctor_id, at)


__all__ = ["doctor_router"]
