from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List
from uuid import UUID
from datetime import date, datetime

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

def day_name(day_of_week: int) -> str:
    if 1 <= day_of_week <= 7:
        return DAY_NAMES[day_of_week - 1]
    return f"Day {day_of_week}"

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

class DaySchedule(CamelModel):
    day_of_week: int
    day_name: Optional[str] = None
    is_working_day: bool
    start_time: Optional[str] = None # HH:MM
    end_time: Optional[str] = None   # HH:MM

class WeeklyScheduleUpdate(CamelModel):
    schedule: List[DaySchedule]

class AbsenceCreate(CamelModel):
    absence_date: date = Field(alias="date")
    is_full_day: bool
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reason: Optional[str] = None

class AbsenceResponse(CamelModel):
    id: UUID
    doctor_id: UUID
    absence_date: date = Field(alias="date")
    is_full_day: bool
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reason: Optional[str] = None

class DoctorAvailabilityResponse(CamelModel):
    doctor_id: UUID
    weekly_schedule: List[DaySchedule]
    absences: List[AbsenceResponse]

class TimeRangeResponse(CamelModel):
    start_time: str
    end_time: str

class EffectiveAvailabilityResponse(CamelModel):
    for_date: date = Field(alias="date")
    day_of_week: int
    day_name: str
    is_working_day: bool
    ranges: List[TimeRangeResponse]
    absences: List[AbsenceResponse] = []

class WeeklyAvailabilityResponse(CamelModel):
    doctor_id: UUID
    start_date: date
    end_date: date
    days: List[EffectiveAvailabilityResponse]

class Slot(CamelModel):
    start_time: datetime
    end_time: datetime
    is_available: bool = True

class DailySlots(CamelModel):
    doctor_id: UUID
    for_date: date = Field(alias="date")
    slot_duration_minutes: int
    slots: List[Slot]
