from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from uuid import UUID, uuid4
from sqlalchemy import Column, DateTime

from clinicbook.core.utils import utcnow

if TYPE_CHECKING:
    from .weekly_schedule import WeeklyScheduleEntry
    from .absence import Absence
    from .appointment import Appointment

class Doctor(SQLModel, table=True):
    __tablename__ = "doctors"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    specialty: Optional[str] = None
    consult_duration_minutes: int = Field(default=30)
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=False), nullable=False))

    weekly_schedule: List["WeeklyScheduleEntry"] = Relationship(back_populates="doctor")
    absences: List["Absence"] = Relationship(back_populates="doctor")
    appointments: List["Appointment"] = Relationship(back_populates="doctor")
