from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import UniqueConstraint
from typing import Optional, TYPE_CHECKING
from datetime import time
from uuid import UUID, uuid4

if TYPE_CHECKING:
    from .doctor import Doctor

class WeeklyScheduleEntry(SQLModel, table=True):
    __tablename__ = "doctor_weekly_schedules"
    __table_args__ = (UniqueConstraint("doctor_id", "day_of_week"),)
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    doctor_id: UUID = Field(foreign_key="doctors.id", index=True)
    day_of_week: int # 1=Monday..7=Sunday
    is_working_day: bool = Field(default=False)
    start_time: Optional[time] = None
    end_time: Optional[time] = None

    doctor: "Doctor" = Relationship(back_populates="weekly_schedule")
