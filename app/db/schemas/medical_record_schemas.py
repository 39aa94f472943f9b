# app/db/schemas/medical_record_schemas.py
import datetime as dt
from typing import Any, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from ..models import MedicalRecordType


class MedicalRecordCreate(BaseModel):
    doctor_id: str = Field(..., description="Authoring doctor")
    type: MedicalRecordType
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", max_length=5000)
    date: Optional[dt.date] = Field(None, description="Defaults to today")
    attachments: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


class MedicalRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    record_id: str
    patient_id: str
    doctor_id: Optional[str]
    doctor_name: str
    type: MedicalRecordType
    title: str
    description: str
    date: dt.date = Field(..., validation_alias=AliasChoices("record_date", "date"))
    attachments: list[str]
    # record_metadata first: declarative models carry a class-level `metadata`
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("record_metadata", "metadata"),
    )
    created_at: dt.datetime
