"""Error types for kanbanflow models."""

from typing import Optional

from pydantic import ValidationError


class BoardValidationError(ValueError):
    """Raised when task or taxonomy input is malformed.

    Attributes:
        field: Wire name of the offending field, if a single field is at fault
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


def from_pydantic_error(error: ValidationError, record: str = "Task") -> BoardValidationError:
    """Translate a pydantic ValidationError into a BoardValidationError.

    Only the first reported problem is surfaced; it names the field using its
    wire alias when pydantic reports one.
    """
    details = error.errors()
    if not details:
        return BoardValidationError(f"Invalid {record}")
    first = details[0]
    loc = first.get("loc") or ()
    field = str(loc[0]) if loc else None
    if first.get("type") == "missing":
        message = f"{record} is missing required field '{field}'"
    else:
        message = f"{record} field '{field}' is invalid: {first.get('msg', 'invalid value')}"
    return BoardValidationError(message, field=field)
