"""Task data model for kanbanflow."""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator


_INSTANT_ADAPTER = TypeAdapter(datetime)


def as_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values pass through."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_instant(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string (or datetime) into a naive UTC datetime.

    Returns None for empty or unparseable values instead of raising.
    """
    if value is None or value == "":
        return None
    try:
        parsed = _INSTANT_ADAPTER.validate_python(value)
    except ValidationError:
        return None
    return as_naive_utc(parsed)


class Task(BaseModel):
    """Canonical Task model.

    References into the taxonomy (status, sub_status, importance, bid_origin)
    are plain names, never ids. A name that no longer resolves is stale, not
    invalid.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique task identifier")
    taskid: str = Field("", description="User-facing task reference")
    title: str = Field(..., description="Task title")
    date: datetime = Field(..., description="Task creation/start instant")
    due_date: datetime = Field(..., alias="dueDate", description="Due instant")
    status: str = Field(..., description="Workflow category name")
    sub_status: str = Field("", alias="subStatus", description="Sub-category name (advisory)")
    importance: str = Field("", description="Importance level name")
    bid_origin: str = Field("", alias="bidOrigin", description="Origin name")
    desc: str = Field("", description="Task description")
    remarks: str = Field("", description="Free-form remarks")
    completion_date: Optional[datetime] = Field(
        None,
        alias="completionDate",
        description="Instant the task entered the completion category (None unless completed)",
    )

    class Config:
        """Pydantic configuration."""
        populate_by_name = True

    @field_validator("title")
    @classmethod
    def _validate_title(cls, v):
        if not v or not v.strip():
            raise ValueError("title must not be blank")
        return v

    @field_validator("taskid", "sub_status", "importance", "bid_origin", "desc", "remarks", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return "" if v is None else v

    @field_validator("completion_date", mode="before")
    @classmethod
    def _empty_completion_date(cls, v):
        return None if v == "" else v

    @field_validator("date", "due_date", "completion_date")
    @classmethod
    def _to_naive_utc(cls, v):
        if v is None:
            return None
        return as_naive_utc(v)

    def to_record(self) -> dict:
        """Serialize to the wire shape (camelCase keys, ISO-8601 instants)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
