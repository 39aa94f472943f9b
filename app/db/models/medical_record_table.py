# app/db/models/medical_record_table.py
from __future__ import annotations
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional
from sqlalchemy import String, Date, Text, JSON, ForeignKey, Enum as sqlalchemy_Enum
from sqlalchemy.orm import Mapped, mapped_column
from app.domain.events import MedicalRecordAdded
from .db_base_model import DbBaseModel, utc_now
from .user_table import enum_values


class MedicalRecordType(str, Enum):
    PRESCRIPTION = "prescription"
    VISIT = "visit"
    DIAGNOSIS = "diagnosis"
    LAB_RESULT = "lab-result"


class MedicalRecord(DbBaseModel):
    """
    Written by a doctor during or after a consultation. Never mutated.
    """

    __tablename__ = "medical_records"

    record_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=DbBaseModel.generate_uuid,
    )

    patient_id: Mapped[str] = mapped_column(
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    doctor_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("doctors.doctor_id", ondelete="SET NULL"),
        nullable=True,
    )
    # Display name at the time of writing
    doctor_name: Mapped[str] = mapped_column(String(210), nullable=False)

    type: Mapped[MedicalRecordType] = mapped_column(
        sqlalchemy_Enum(
            MedicalRecordType,
            name="medical_record_type",
            native_enum=False,
            length=20,
            values_callable=enum_values,
        ),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    record_date: Mapped[date] = mapped_column(Date, nullable=False)

    attachments: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    # "metadata" is reserved on declarative classes
    record_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSON, nullable=False, default=dict
    )

    @classmethod
    def write(
        cls,
        *,
        patient_id: str,
        doctor_id: Optional[str],
        doctor_name: str,
        type: MedicalRecordType,
        title: str,
        description: str = "",
        record_date: Optional[date] = None,
        attachments: Optional[list[str]] = None,
        metadata: Optional[dict[str, Any]] = None,
        at: Optional[datetime] = None,
    ) -> tuple["MedicalRecord", MedicalRecordAdded]:
        now = at or utc_now()
        record = cls(
            record_id=cls.generate_uuid(),
            patient_id=patient_id,
            doctor_id=doctor_id,
            doctor_name=doctor_name,
            type=type,
            title=title,
            description=description,
            record_date=record_date or now.date(),
            attachments=list(attachments or []),
            record_metadata=dict(metadata or {}),
            created_at=now,
            updated_at=now,
        )
        return record, MedicalRecordAdded(
            record_id=record.record_id,
            patient_id=patient_id,
            record_type=type.value,
            occurred_at=now,
        )


__all__ = ["MedicalRecord", "MedicalRecordType"]
