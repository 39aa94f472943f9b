# app/services/v1/doctor_service.py
from datetime import datetime
from typing import Optional
from common.api_error import NotFoundError
from common.logger import get_app_logger
from app.domain.availability import unbookable_reason
from app.db.models import Doctor, MedicalSpecialty
from app.db.schemas import (
    AvailabilitySchema,
    BookabilityResponse,
    DoctorCreate,
    DoctorResponse,
    DoctorUpdate,
    SpecialtyResponse,
    UserDto,
    to_wall_clock,
)
from app.db.unit_of_work import UnitOfWork
from .user_service import ensure_email_free

logger = get_app_logger(__name__)


class DoctorService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def create_doctor(self, data: DoctorCreate) -> UserDto:
        """
        Register a user with role 'doctor' together with its doctor profile.
        Raises UserRegistered, then DoctorRegistered.
        """
        await ensure_email_free(self.uow, data.email)

        doctor, events = Doctor.register(
            email=data.email,
            first_name=data.first_name,
            last_name=data.last_name,
            specialization=data.specialization,
            consultation_fee=data.consultation_fee,
            availability=data.availability.to_domain(),
            qualifications=data.qualifications,
            years_of_experience=data.years_of_experience,
            phone=data.phone,
        )
        self.uow.add(doctor, *events)
        written = await self.uow.save_changes()

        logger.info(
            "Doctor registered",
            doctor_id=doctor.doctor_id,
            specialization=doctor.specialization.value,
            written_rows=written,
        )
        return UserDto.model_validate(doctor)

    async def list_doctors(
        self, specialization: Optional[MedicalSpecialty] = None
    ) -> list[DoctorResponse]:
        criteria = []
        if specialization is not None:
            criteria.append(Doctor.specialization == specialization)
        doctors = await self.uow.doctors.find(*criteria, order_by=[Doctor.created_at])
        return [DoctorResponse.from_doctor(doctor) for doctor in doctors]

    async def get_doctor(self, doctor_id: str) -> DoctorResponse:
        return DoctorResponse.from_doctor(await require_doctor(self.uow, doctor_id))

    async def update_doctor(self, doctor_id: str, data: DoctorUpdate) -> DoctorResponse:
        doctor = await require_doctor(self.uow, doctor_id)

        updated = doctor.update_profile(data.model_dump(exclude_none=True))
        if updated is not None:
            self.uow.record(doctor, updated)
            await self.uow.save_changes()
        return DoctorResponse.from_doctor(doctor)

    async def update_availability(
        self, doctor_id: str, availability: AvailabilitySchema
    ) -> DoctorResponse:
        doctor = await require_doctor(self.uow, doctor_id)

        self.uow.record(doctor, doctor.replace_availability(availability.to_domain()))
        await self.uow.save_changes()
        return DoctorResponse.from_doctor(doctor)

    async def check_bookability(
        self, doctor_id: str, at: datetime
    ) -> BookabilityResponse:
        doctor = await require_doctor(self.uow, doctor_id)
        at = to_wall_clock(at)
        reason = unbookable_reason(doctor.availability(), at)
        return BookabilityResponse(
            doctor_id=doctor_id,
            at=at,
            bookable=reason is None,
            reason=reason,
        )

    @staticmethod
    def list_specialties() -> list[SpecialtyResponse]:
        return [SpecialtyResponse.from_specialty(s) for s in MedicalSpecialty]


async def require_doctor(uow: UnitOfWork, doctor_id: str) -> Doctor:
    doctor = await uow.doctors.get(doctor_id)
    if doctor is None:
        raise NotFoundError("Doctor", doctor_id)
    return doctor


__all__ = ["DoctorService", "require_doctor"]
