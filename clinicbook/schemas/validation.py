from pydantic import BaseModel
from typing import Any, List, Optional

class FieldError(BaseModel):
    field: str
    message: str

class ValidationResult(BaseModel):
    """Outcome of validating user input: a normalised value or field-tagged errors."""
    value: Optional[Any] = None
    errors: List[FieldError] = []

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @classmethod
    def accept(cls, value: Any) -> "ValidationResult":
        return cls(value=value)

    @classmethod
    def reject(cls, errors: List[FieldError]) -> "ValidationResult":
        return cls(errors=errors)
