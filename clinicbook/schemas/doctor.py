from typing import Optional
from uuid import UUID
from datetime import datetime

from clinicbook.schemas.availability import CamelModel

class DoctorBase(CamelModel):
    name: str
    specialty: Optional[str] = None
    consult_duration_minutes: int = 30

class DoctorCreate(DoctorBase):
    pass

class DoctorResponse(DoctorBase):
    id: UUID
    created_at: datetime
