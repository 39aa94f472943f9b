# app/db/schemas/doctor_schema.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from ..models import (
    Doctor,
    MedicalSpecialty,
    SpecialtyCategory,
    specialty_category,
    specialty_code,
)
from .schedule_schemas import AvailabilitySchema


class DoctorCreate(BaseModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    specialization: MedicalSpecialty
    consultation_fee: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    qualifications: list[str] = Field(default_factory=list)
    years_of_experience: int = Field(0, ge=0, le=80)
    phone: Optional[str] = Field(None, max_length=30)
    availability: AvailabilitySchema = Field(default_factory=AvailabilitySchema)

    @classmethod
    def seed_records(
        cls,
        template: dict,
        records: int,
        start_index: int = 0,
    ) -> List["DoctorCreate"]:
        specialties = template["specializations"]
        result = []
        for i in range(start_index, start_index + records):
            record = cls(
                email=f"{template['email_prefix']}.{i}@{template['email_domain']}",
                first_name=template["first_name"],
                last_name=f"{template['last_name']}{i}",
                specialization=specialties[i % len(specialties)],
                consultation_fee=template["consultation_fee"],
                qualifications=template.get("qualifications", []),
                years_of_experience=template.get("years_of_experience", 0),
            )
            result.append(record)
        return result


class DoctorUpdate(BaseModel):
    # All fields optional for PATCH
    consultation_fee: Optional[Decimal] = Field(
        None, ge=0, max_digits=10, decimal_places=2
    )
    qualifications: Optional[list[str]] = None
    years_of_experience: Optional[int] = Field(None, ge=0, le=80)


class DoctorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    doctor_id: str
    email: str
    first_name: str
    last_name: str
    display_name: str
    specialization: MedicalSpecialty
    specialty_category: SpecialtyCategory
    consultation_fee: Decimal
    qualifications: list[str]
    years_of_experience: int
    rating: float
    total_patients: int
    is_available: bool
    availability: AvailabilitySchema
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_doctor(cls, doctor: Doctor) -> "DoctorResponse":
        return cls(
            doctor_id=doctor.doctor_id,
            email=doctor.email,
            first_name=doctor.first_name,
            last_name=doctor.last_name,
            display_name=doctor.display_name,
            specialization=doctor.specialization,
            specialty_category=specialty_category(doctor.specialization),
            consultation_fee=doctor.consultation_fee,
            qualifications=list(doctor.qualifications),
            years_of_experience=doctor.years_of_experience,
            rating=doctor.rating,
            total_patients=doctor.total_patients,
            is_available=doctor.is_available,
            availability=AvailabilitySchema.from_domain(doctor.availability()),
            created_at=doctor.created_at,
            updated_at=doctor.updated_at,
        )


class SpecialtyResponse(BaseModel):
    name: MedicalSpecialty
    code: int
    category: SpecialtyCategory

    @classmethod
    def from_specialty(cls, specialty: MedicalSpecialty) -> "SpecialtyResponse":
        return cls(
            name=specialty,
            code=specialty_code(specialty),
            category=specialty_category(specialty),
        )


class BookabilityResponse(BaseModel):
    doctor_id: str
    at: datetime
    bookable: bool
    reason: Optional[str] = None
