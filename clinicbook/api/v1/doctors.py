from fastapi import APIRouter, Depends
from typing import List
from uuid import UUID

from clinicbook.api.deps import get_doctor_service
from clinicbook.schemas.doctor import DoctorCreate, DoctorResponse
from clinicbook.services.doctor_service import DoctorService

router = APIRouter()

@router.post("/", response_model=DoctorResponse, status_code=201)
async def create_doctor(
    doctor: DoctorCreate,
    service: DoctorService = Depends(get_doctor_service)
):
    return await service.create_doctor(doctor)

@router.get("/", response_model=List[DoctorResponse])
async def read_doctors(
    service: DoctorService = Depends(get_doctor_service)
):
    return await service.get_doctors()

@router.get("/{doctor_id}", response_model=DoctorResponse)
async def read_doctor(
    doctor_id: UUID,
    service: DoctorService = Depends(get_doctor_service)
):
    return await service.get_doctor(doctor_id)
