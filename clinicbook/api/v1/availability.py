from datetime import date
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status

from clinicbook.api.deps import get_schedule_service
from clinicbook.schemas.appointment import AppointmentCreate, AppointmentResponse
from clinicbook.schemas.availability import (
    AbsenceCreate, AbsenceResponse, DailySlots, DaySchedule, DoctorAvailabilityResponse,
    EffectiveAvailabilityResponse, WeeklyAvailabilityResponse, WeeklyScheduleUpdate,
)
from clinicbook.services.schedule_service import ScheduleService

router = APIRouter()

@router.get("/doctors/{doctor_id}/availability", response_model=DoctorAvailabilityResponse)
async def get_doctor_availability(
    doctor_id: UUID,
    service: ScheduleService = Depends(get_schedule_service)
):
    return await service.get_doctor_availability(doctor_id)

@router.put("/doctors/{doctor_id}/availability/weekly", response_model=List[DaySchedule])
async def update_weekly_schedule(
    doctor_id: UUID,
    body: WeeklyScheduleUpdate,
    service: ScheduleService = Depends(get_schedule_service)
):
    return await service.update_weekly_schedule(doctor_id, body.schedule)

# Declared before the {for_date} route so "week" is not parsed as a date
@router.get("/doctors/{doctor_id}/availability/week", response_model=WeeklyAvailabilityResponse)
async def get_weekly_availability(
    doctor_id: UUID,
    start_date: date,
    service: ScheduleService = Depends(get_schedule_service)
):
    return await service.get_weekly_availability(doctor_id, start_date)

@router.get("/doctors/{doctor_id}/availability/{for_date}", response_model=EffectiveAvailabilityResponse)
async def get_effective_availability(
    doctor_id: UUID,
    for_date: date,
    service: ScheduleService = Depends(get_schedule_service)
):
    return await service.get_effective_availability(doctor_id, for_date)

@router.post("/doctors/{doctor_id}/absences", response_model=AbsenceResponse, status_code=201)
async def add_absence(
    doctor_id: UUID,
    body: AbsenceCreate,
    service: ScheduleService = Depends(get_schedule_service)
):
    return await service.add_absence(doctor_id, body)

@router.delete("/absences/{absence_id}", status_code=204)
async def delete_absence(
    absence_id: UUID,
    service: ScheduleService = Depends(get_schedule_service)
):
    if not await service.delete_absence(absence_id):
        raise HTTPException(status_code=404, detail="Absence not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/doctors/{doctor_id}/slots", response_model=DailySlots)
async def get_doctor_slots(
    doctor_id: UUID,
    date: date,
    service: ScheduleService = Depends(get_schedule_service)
):
    return await service.get_doctor_slots(doctor_id, date)

@router.post("/doctors/{doctor_id}/appointments", response_model=AppointmentResponse, status_code=201)
async def book_appointment(
    doctor_id: UUID,
    body: AppointmentCreate,
    service: ScheduleService = Depends(get_schedule_service)
):
    return await service.book_appointment(doctor_id, body)

@router.post("/appointments/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: UUID,
    service: ScheduleService = Depends(get_schedule_service)
):
    return await service.cancel_appointment(appointment_id)
