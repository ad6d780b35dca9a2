from typing import List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from clinicbook.core.exceptions import NotFoundError, ScheduleValidationError
from clinicbook.core.logger import logger
from clinicbook.db.models import Doctor
from clinicbook.schemas.doctor import DoctorCreate
from clinicbook.schemas.validation import FieldError

class DoctorService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_doctor(self, data: DoctorCreate) -> Doctor:
        if data.consult_duration_minutes <= 0:
            raise ScheduleValidationError([FieldError(
                field="consultDurationMinutes",
                message="Consultation duration must be a positive number of minutes.",
            )])

        doctor = Doctor(**data.model_dump())
        self.session.add(doctor)
        await self.session.commit()
        await self.session.refresh(doctor)
        logger.info(f"Doctor {doctor.id} created")
        return doctor

    async def get_doctors(self) -> List[Doctor]:
        query = select(Doctor).order_by(Doctor.name)
        result = await self.session.execute(query)
        return result.scalars().all()

    async def get_doctor(self, doctor_id: UUID) -> Doctor:
        doctor = await self.session.get(Doctor, doctor_id)
        if not doctor:
            raise NotFoundError("Doctor", doctor_id)
        return doctor
