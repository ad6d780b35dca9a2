from uuid import UUID
from datetime import datetime
from typing import Optional

from clinicbook.schemas.availability import CamelModel

class AppointmentCreate(CamelModel):
    patient_name: str
    patient_phone: Optional[str] = None
    scheduled_start: datetime

class AppointmentResponse(CamelModel):
    id: UUID
    doctor_id: UUID
    patient_name: str
    patient_phone: Optional[str] = None
    state: str
    scheduled_start: datetime
    created_at: datetime
