from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import date, datetime, time
from uuid import UUID, uuid4
from sqlalchemy import Column, DateTime

from clinicbook.core.utils import utcnow

if TYPE_CHECKING:
    from .doctor import Doctor

class Absence(SQLModel, table=True):
    __tablename__ = "doctor_absences"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    doctor_id: UUID = Field(foreign_key="doctors.id", index=True)
    absence_date: date = Field(index=True)
    is_full_day: bool = Field(default=True)
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    reason: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=False), nullable=False))

    doctor: "Doctor" = Relationship(back_populates="absences")
