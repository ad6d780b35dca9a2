from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clinicbook.db.repository import SqlAvailabilityRepository
from clinicbook.db.session import get_session
from clinicbook.services.doctor_service import DoctorService
from clinicbook.services.schedule_service import ScheduleService

async def get_schedule_service(session: AsyncSession = Depends(get_session)) -> ScheduleService:
    return ScheduleService(SqlAvailabilityRepository(session))

async def get_doctor_service(session: AsyncSession = Depends(get_session)) -> DoctorService:
    return DoctorService(session)
