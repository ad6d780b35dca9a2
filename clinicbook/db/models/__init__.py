from sqlmodel import SQLModel
from .doctor import Doctor
from .weekly_schedule import WeeklyScheduleEntry
from .absence import Absence
from .appointment import Appointment

__all__ = [
    "SQLModel",
    "Doctor",
    "WeeklyScheduleEntry",
    "Absence",
    "Appointment",
]
