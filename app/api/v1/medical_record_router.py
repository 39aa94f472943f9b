# app/api/v1/medical_record_router.py
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from app.db import UnitOfWork, get_unit_of_work
from app.db.models import MedicalRecordType
from app.db.schemas import MedicalRecordCreate, MedicalRecordResponse
from app.services.v1 import MedicalRecordService

medical_record_router = APIRouter(
    prefix="/patients",
    tags=["Medical records"],
)


@medical_record_router.get(
    "/{patient_id}/medical-history",
    response_model=list[MedicalRecordResponse],
    summary="Get a patient's medical history",
    responses={404: {"description": "Patient not found"}},
)
async def list_medical_history(
    patient_id: str,
    record_type: Optional[MedicalRecordType] = Query(None, alias="type"),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return await MedicalRecordService(uow).list_history(patient_id, record_type)


@medical_record_router.post(
    "/{patient_id}/medical-history",
    response_model=MedicalRecordResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a medical record",
    responses={404: {"description": "Patient or doctor not found"}},
)
async def add_medical_record(
    patient_id: str,
    data: MedicalRecordCreate,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return await MedicalRecordService(uow).add_record(patient_id, data)


__all__ = ["medical_record_router"]
