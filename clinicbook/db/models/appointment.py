from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime
from uuid import UUID, uuid4
from sqlalchemy import Column, DateTime

from clinicbook.core.utils import utcnow

if TYPE_CHECKING:
    from .doctor import Doctor

class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    doctor_id: UUID = Field(foreign_key="doctors.id", index=True)
    patient_name: str
    patient_phone: Optional[str] = None
    state: str = Field(default="booked") # booked, cancelled
    # Local wall-clock time of the slot, naive
    scheduled_start: datetime = Field(sa_column=Column(DateTime(timezone=False), nullable=False, index=True))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=False), nullable=False))

    doctor: "Doctor" = Relationship(back_populates="appointments")
