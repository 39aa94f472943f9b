# app/services/v1/medical_record_service.py
from typing import Optional
from common.api_error import ValidationError
from app.db.models import MedicalRecord, MedicalRecordType, UserRole
from app.db.schemas import MedicalRecordCreate, MedicalRecordResponse
from app.db.unit_of_work import UnitOfWork
from .doctor_service import require_doctor
from .user_service import require_user


class MedicalRecordService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def add_record(
        self, patient_id: str, data: MedicalRecordCreate
    ) -> MedicalRecordResponse:
        patient = await require_user(self.uow, patient_id, entity="Patient")
        if patient.role != UserRole.PATIENT:
            raise ValidationError(f"User '{patient_id}' is not a patient")
        doctor = await require_doctor(self.uow, data.doctor_id)

        record, added = MedicalRecord.write(
            patient_id=patient.user_id,
            doctor_id=doctor.doctor_id,
            doctor_name=doctor.display_name,
            type=data.type,
            title=data.title,
            description=data.description,
            record_date=data.date,
            attachments=data.attachments,
            metadata=data.metadata,
        )
        self.uow.add(record, added)
        await self.uow.save_changes()
        return MedicalRecordResponse.model_validate(record)

    async def list_history(
        self, patient_id: str, record_type: Optional[MedicalRecordType] = None
    ) -> list[MedicalRecordResponse]:
        """Newest first."""
        await require_user(self.uow, patient_id, entity="Patient")

        criteria = [MedicalRecord.patient_id == patient_id]
        if record_type is not None:
            criteria.append(MedicalRecord.type == record_type)

        records = await self.uow.medical_records.find(
            *criteria,
            order_by=[MedicalRecord.record_date.desc(), MedicalRecord.created_at.desc()],
        )
        return [MedicalRecordResponse.model_validate(r) for r in records]


__all__ = ["MedicalRecordService"]
