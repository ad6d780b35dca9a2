from datetime import date, datetime
from typing import List, Optional, Protocol, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import delete, select

from clinicbook.core.exceptions import PersistenceError
from clinicbook.core.logger import logger
from clinicbook.db.models import Absence, Appointment, Doctor, WeeklyScheduleEntry

class AvailabilityRepository(Protocol):
    """Storage operations the schedule service relies on."""

    async def get_doctor(self, doctor_id: UUID) -> Optional[Doctor]: ...

    async def load_weekly_schedule(self, doctor_id: UUID) -> List[WeeklyScheduleEntry]: ...

    async def replace_weekly_schedule(self, doctor_id: UUID, entries: Sequence[WeeklyScheduleEntry]) -> List[WeeklyScheduleEntry]: ...

    async def load_absences(self, doctor_id: UUID, on_date: Optional[date] = None) -> List[Absence]: ...

    async def insert_absence(self, absence: Absence) -> Absence: ...

    async def delete_absence(self, absence_id: UUID) -> bool: ...

    async def load_booked_starts(self, doctor_id: UUID, start: datetime, end: datetime) -> List[datetime]: ...

    async def insert_appointment(self, appointment: Appointment) -> Appointment: ...

    async def get_appointment(self, appointment_id: UUID) -> Optional[Appointment]: ...

    async def update_appointment_state(self, appointment: Appointment, state: str) -> Appointment: ...

class SqlAvailabilityRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _commit(self, action: str):
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error(f"Database error during {action}: {exc}")
            raise PersistenceError(f"Failed to {action}.") from exc

    async def get_doctor(self, doctor_id: UUID) -> Optional[Doctor]:
        return await self.session.get(Doctor, doctor_id)

    async def load_weekly_schedule(self, doctor_id: UUID) -> List[WeeklyScheduleEntry]:
        stmt = select(WeeklyScheduleEntry).where(
            WeeklyScheduleEntry.doctor_id == doctor_id
        ).order_by(WeeklyScheduleEntry.day_of_week)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def replace_weekly_schedule(self, doctor_id: UUID, entries: Sequence[WeeklyScheduleEntry]) -> List[WeeklyScheduleEntry]:
        # Delete and insert share one transaction so readers never see a partial week
        try:
            await self.session.execute(
                delete(WeeklyScheduleEntry).where(WeeklyScheduleEntry.doctor_id == doctor_id)
            )
            for entry in entries:
                entry.doctor_id = doctor_id
                self.session.add(entry)
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error(f"Database error during weekly schedule replace: {exc}")
            raise PersistenceError("Failed to update weekly schedule.") from exc

        await self._commit("update weekly schedule")
        return await self.load_weekly_schedule(doctor_id)

    async def load_absences(self, doctor_id: UUID, on_date: Optional[date] = None) -> List[Absence]:
        stmt = select(Absence).where(Absence.doctor_id == doctor_id)
        if on_date is not None:
            stmt = stmt.where(Absence.absence_date == on_date)
        stmt = stmt.order_by(Absence.absence_date, Absence.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def insert_absence(self, absence: Absence) -> Absence:
        self.session.add(absence)
        await self._commit("add absence")
        await self.session.refresh(absence)
        return absence

    async def delete_absence(self, absence_id: UUID) -> bool:
        absence = await self.session.get(Absence, absence_id)
        if not absence:
            return False
        await self.session.delete(absence)
        await self._commit("delete absence")
        return True

    async def load_booked_starts(self, doctor_id: UUID, start: datetime, end: datetime) -> List[datetime]:
        stmt = select(Appointment.scheduled_start).where(
            Appointment.doctor_id == doctor_id,
            Appointment.state == "booked",
            Appointment.scheduled_start >= start,
            Appointment.scheduled_start < end,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def insert_appointment(self, appointment: Appointment) -> Appointment:
        self.session.add(appointment)
        await self._commit("book appointment")
        await self.session.refresh(appointment)
        return appointment

    async def get_appointment(self, appointment_id: UUID) -> Optional[Appointment]:
        return await self.session.get(Appointment, appointment_id)

    async def update_appointment_state(self, appointment: Appointment, state: str) -> Appointment:
        appointment.state = state
        self.session.add(appointment)
        await self._commit("update appointment")
        await self.session.refresh(appointment)
        return appointment
