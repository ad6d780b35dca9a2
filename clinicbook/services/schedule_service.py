from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence
from uuid import UUID

from clinicbook.core.config import settings
from clinicbook.core.exceptions import NotFoundError, PersistenceError, ScheduleValidationError
from clinicbook.core.logger import logger
from clinicbook.db.models import Absence, Appointment, Doctor, WeeklyScheduleEntry
from clinicbook.db.repository import AvailabilityRepository
from clinicbook.schemas.appointment import AppointmentCreate
from clinicbook.schemas.availability import (
    AbsenceCreate, AbsenceResponse, DailySlots, DaySchedule, DoctorAvailabilityResponse,
    EffectiveAvailabilityResponse, Slot, TimeRangeResponse, WeeklyAvailabilityResponse, day_name,
)
from clinicbook.schemas.validation import FieldError
from clinicbook.services.availability_resolver import (
    EffectiveAvailability, format_time, parse_time, resolve_availability, split_into_slots,
    validate_absence, validate_weekly_schedule,
)

def default_week() -> List[DaySchedule]:
    week = []
    for day in range(1, 8):
        is_working = day in settings.DEFAULT_WORKING_DAYS
        week.append(DaySchedule(
            day_of_week=day,
            day_name=day_name(day),
            is_working_day=is_working,
            start_time=settings.DEFAULT_START_TIME if is_working else None,
            end_time=settings.DEFAULT_END_TIME if is_working else None,
        ))
    return week

def to_day_schedule(entry: WeeklyScheduleEntry) -> DaySchedule:
    return DaySchedule(
        day_of_week=entry.day_of_week,
        day_name=day_name(entry.day_of_week),
        is_working_day=entry.is_working_day,
        start_time=format_time(entry.start_time),
        end_time=format_time(entry.end_time),
    )

def to_absence_response(absence: Absence) -> AbsenceResponse:
    return AbsenceResponse(
        id=absence.id,
        doctor_id=absence.doctor_id,
        absence_date=absence.absence_date,
        is_full_day=absence.is_full_day,
        start_time=format_time(absence.start_time),
        end_time=format_time(absence.end_time),
        reason=absence.reason,
    )

def to_effective_response(availability: EffectiveAvailability) -> EffectiveAvailabilityResponse:
    return EffectiveAvailabilityResponse(
        for_date=availability.for_date,
        day_of_week=availability.day_of_week,
        day_name=day_name(availability.day_of_week),
        is_working_day=availability.is_working_day,
        ranges=[
            TimeRangeResponse(start_time=format_time(r.start), end_time=format_time(r.end))
            for r in availability.ranges
        ],
        absences=[to_absence_response(a) for a in availability.absences],
    )

class ScheduleService:
    def __init__(self, repository: AvailabilityRepository):
        self.repository = repository

    async def _require_doctor(self, doctor_id: UUID) -> Doctor:
        doctor = await self.repository.get_doctor(doctor_id)
        if not doctor:
            raise NotFoundError("Doctor", doctor_id)
        return doctor

    async def _load_or_create_week(self, doctor_id: UUID) -> List[WeeklyScheduleEntry]:
        entries = await self.repository.load_weekly_schedule(doctor_id)
        if entries:
            return entries

        logger.info(f"No weekly schedule for doctor {doctor_id}, creating default week")
        try:
            return await self.repository.replace_weekly_schedule(
                doctor_id, [self._to_entry(doctor_id, day) for day in default_week()]
            )
        except PersistenceError:
            # A concurrent first read may have stored the default week already
            entries = await self.repository.load_weekly_schedule(doctor_id)
            if not entries:
                raise
            logger.info(f"Default week for doctor {doctor_id} was created concurrently, reusing it")
            return entries

    @staticmethod
    def _to_entry(doctor_id: UUID, day: DaySchedule) -> WeeklyScheduleEntry:
        return WeeklyScheduleEntry(
            doctor_id=doctor_id,
            day_of_week=day.day_of_week,
            is_working_day=day.is_working_day,
            start_time=parse_time(day.start_time) if day.start_time else None,
            end_time=parse_time(day.end_time) if day.end_time else None,
        )

    async def get_doctor_availability(self, doctor_id: UUID) -> DoctorAvailabilityResponse:
        await self._require_doctor(doctor_id)
        entries = await self._load_or_create_week(doctor_id)
        absences = await self.repository.load_absences(doctor_id)
        return DoctorAvailabilityResponse(
            doctor_id=doctor_id,
            weekly_schedule=[to_day_schedule(e) for e in entries],
            absences=[to_absence_response(a) for a in absences],
        )

    async def update_weekly_schedule(self, doctor_id: UUID, schedule: Sequence[DaySchedule]) -> List[DaySchedule]:
        await self._require_doctor(doctor_id)

        result = validate_weekly_schedule(schedule)
        if not result.is_valid:
            logger.warning(f"Rejected weekly schedule for doctor {doctor_id}: {[e.field for e in result.errors]}")
            raise ScheduleValidationError(result.errors)

        saved = await self.repository.replace_weekly_schedule(
            doctor_id, [self._to_entry(doctor_id, day) for day in result.value]
        )
        logger.info(f"Weekly schedule updated for doctor {doctor_id}")
        return [to_day_schedule(e) for e in saved]

    async def add_absence(self, doctor_id: UUID, data: AbsenceCreate, today: Optional[date] = None) -> AbsenceResponse:
        await self._require_doctor(doctor_id)

        result = validate_absence(data, today=today)
        if not result.is_valid:
            logger.warning(f"Rejected absence for doctor {doctor_id}: {[e.field for e in result.errors]}")
            raise ScheduleValidationError(result.errors)

        accepted: AbsenceCreate = result.value
        absence = await self.repository.insert_absence(Absence(
            doctor_id=doctor_id,
            absence_date=accepted.absence_date,
            is_full_day=accepted.is_full_day,
            start_time=parse_time(accepted.start_time) if accepted.start_time else None,
            end_time=parse_time(accepted.end_time) if accepted.end_time else None,
            reason=accepted.reason,
        ))
        logger.info(f"Absence {absence.id} added for doctor {doctor_id} on {absence.absence_date}")
        return to_absence_response(absence)

    async def delete_absence(self, absence_id: UUID) -> bool:
        deleted = await self.repository.delete_absence(absence_id)
        if deleted:
            logger.info(f"Absence {absence_id} deleted")
        return deleted

    async def _resolve(self, doctor_id: UUID, for_date: date) -> EffectiveAvailability:
        entries = await self._load_or_create_week(doctor_id)
        absences = await self.repository.load_absences(doctor_id, on_date=for_date)
        return resolve_availability(entries, absences, for_date)

    async def get_effective_availability(self, doctor_id: UUID, for_date: date) -> EffectiveAvailabilityResponse:
        await self._require_doctor(doctor_id)
        return to_effective_response(await self._resolve(doctor_id, for_date))

    async def get_weekly_availability(self, doctor_id: UUID, start_date: date) -> WeeklyAvailabilityResponse:
        await self._require_doctor(doctor_id)
        entries = await self._load_or_create_week(doctor_id)
        absences = await self.repository.load_absences(doctor_id)

        days = []
        for i in range(7):
            current_date = start_date + timedelta(days=i)
            days.append(to_effective_response(resolve_availability(entries, absences, current_date)))

        return WeeklyAvailabilityResponse(
            doctor_id=doctor_id,
            start_date=start_date,
            end_date=start_date + timedelta(days=6),
            days=days,
        )

    async def get_doctor_slots(self, doctor_id: UUID, for_date: date, now: Optional[datetime] = None) -> DailySlots:
        doctor = await self._require_doctor(doctor_id)
        now = now or datetime.now()
        duration = doctor.consult_duration_minutes or settings.SLOT_INTERVAL_MINUTES

        slots = []
        if for_date >= now.date():
            availability = await self._resolve(doctor_id, for_date)
            day_start = datetime.combine(for_date, datetime.min.time())
            booked = set(await self.repository.load_booked_starts(
                doctor_id, day_start, day_start + timedelta(days=1)
            ))

            for slot in split_into_slots(availability.ranges, for_date, duration):
                start = datetime.combine(for_date, slot.start)
                if for_date == now.date() and start <= now:
                    continue
                slots.append(Slot(
                    start_time=start,
                    end_time=datetime.combine(for_date, slot.end),
                    is_available=start not in booked,
                ))

        return DailySlots(
            doctor_id=doctor_id,
            for_date=for_date,
            slot_duration_minutes=duration,
            slots=slots,
        )

    async def book_appointment(self, doctor_id: UUID, data: AppointmentCreate, now: Optional[datetime] = None) -> Appointment:
        scheduled_start = data.scheduled_start
        if scheduled_start.tzinfo is not None:
            # Slots are naive local wall-clock times
            scheduled_start = scheduled_start.astimezone().replace(tzinfo=None)
        if scheduled_start.second or scheduled_start.microsecond:
            raise ScheduleValidationError([FieldError(
                field="scheduledStart",
                message="Appointments start on a whole minute.",
            )])

        daily = await self.get_doctor_slots(doctor_id, scheduled_start.date(), now=now)

        if not any(s.start_time == scheduled_start and s.is_available for s in daily.slots):
            raise ScheduleValidationError([FieldError(
                field="scheduledStart",
                message="The requested time is not an available slot for this doctor.",
            )])

        appointment = await self.repository.insert_appointment(Appointment(
            doctor_id=doctor_id,
            patient_name=data.patient_name,
            patient_phone=data.patient_phone,
            scheduled_start=scheduled_start,
            state="booked",
        ))
        logger.info(f"Appointment {appointment.id} booked with doctor {doctor_id} at {scheduled_start.isoformat()}")
        return appointment

    async def cancel_appointment(self, appointment_id: UUID) -> Appointment:
        appointment = await self.repository.get_appointment(appointment_id)
        if not appointment:
            raise NotFoundError("Appointment", appointment_id)
        if appointment.state == "cancelled":
            return appointment

        appointment = await self.repository.update_appointment_state(appointment, "cancelled")
        logger.info(f"Appointment {appointment_id} cancelled, slot {appointment.scheduled_start.isoformat()} released")
        return appointment
