# app/db/schemas/appointment_schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from datetime import datetime
from decimal import Decimal
from typing import Optional
from ..models import AppointmentStatus, AppointmentType
from .schedule_schemas import WallClockDateTime


class AppointmentCreate(BaseModel):
    doctor_id: str = Field(..., description="Id of the doctor being booked")
    # Visitors book without an account
    patient_id: Optional[str] = None
    patient_name: str = Field(..., min_length=1, max_length=200)
    patient_email: EmailStr
    symptoms: str = Field("", max_length=2000)
    preferred_time: WallClockDateTime = Field(
        ..., description="Requested slot, read on its own wall clock"
    )
    type: AppointmentType = AppointmentType.CONSULTATION


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus
    actor_id: str = Field(..., description="User taking the action")
    expected_version: Optional[int] = Field(
        None, ge=1, description="Reject the change if the appointment moved on"
    )
    actual_time: Optional[WallClockDateTime] = None
    notes: Optional[str] = Field(None, max_length=1000)


class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    appointment_id: str
    doctor_id: str
    patient_id: Optional[str]
    patient_name: str
    patient_email: str
    symptoms: str
    preferred_time: datetime
    actual_time: Optional[datetime]
    status: AppointmentStatus
    type: AppointmentType
    fee: Decimal
    notes: Optional[str]
    version: int
    created_at: datetime
    updated_at: datetime
