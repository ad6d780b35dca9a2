from typing import List, Optional
from clinicbook.schemas.validation import FieldError

class ClinicBookError(Exception):
    """Base class for errors surfaced to API callers."""
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class ScheduleValidationError(ClinicBookError):
    status_code = 422

    def __init__(self, errors: List[FieldError], message: str = "Validation error"):
        super().__init__(message)
        self.errors = errors

class NotFoundError(ClinicBookError):
    status_code = 404

    def __init__(self, resource: str, resource_id: Optional[object] = None):
        detail = f"{resource} not found" if resource_id is None else f"{resource} {resource_id} not found"
        super().__init__(detail)
        self.resource = resource
        self.resource_id = resource_id

class PersistenceError(ClinicBookError):
    status_code = 503
