"""Task creation and mutation for kanbanflow.

This module owns the completion-timestamp state machine: completion_date is
set when a task first enters the completion category, kept across repeated
writes that stay there, and cleared when the task leaves it. It is never an
independent input.
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from kanbanflow.engine.completion import is_completion_status
from kanbanflow.models.context import BoardContext, DEFAULT_COMPLETION_CATEGORY
from kanbanflow.models.errors import BoardValidationError, from_pydantic_error
from kanbanflow.models.task import Task, as_naive_utc

logger = logging.getLogger(__name__)

# Wire name -> model attribute for every patchable field
_FIELD_NAMES: Dict[str, str] = {
    "taskid": "taskid",
    "title": "title",
    "date": "date",
    "dueDate": "due_date",
    "status": "status",
    "subStatus": "sub_status",
    "importance": "importance",
    "bidOrigin": "bid_origin",
    "desc": "desc",
    "remarks": "remarks",
}
_DERIVED_FIELDS = {"id": "id", "completionDate": "completion_date"}
_REQUIRED_TEXT_FIELDS = ("title", "taskid", "status")


def _now(now: Optional[datetime]) -> datetime:
    return as_naive_utc(now) if now is not None else datetime.utcnow()


def _to_attributes(data: Mapping[str, Any], strict: bool = False) -> Dict[str, Any]:
    """Map wire or attribute names onto model attribute names.

    With ``strict`` an unrecognized key is rejected instead of ignored.
    """
    attributes: Dict[str, Any] = {}
    by_attribute = {attr: attr for attr in _FIELD_NAMES.values()}
    for key, value in data.items():
        attribute = _FIELD_NAMES.get(key) or by_attribute.get(key)
        if attribute is not None:
            attributes[attribute] = value
        elif strict:
            raise BoardValidationError(f"Unknown task field '{key}'", field=str(key))
    return attributes


def _wire_name(attribute: str) -> str:
    for wire, attr in {**_FIELD_NAMES, **_DERIVED_FIELDS}.items():
        if attr == attribute:
            return wire
    return attribute


def _require_text(attributes: Mapping[str, Any], fields=_REQUIRED_TEXT_FIELDS) -> None:
    for field in fields:
        value = attributes.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise BoardValidationError(f"Task is missing required field '{field}'", field=field)


def _completion_for(
    previous_status: Optional[str],
    new_status: str,
    completion_date: Optional[datetime],
    completion_category: str,
    now: datetime,
) -> Optional[datetime]:
    """Completion timestamp after a status write."""
    entering = is_completion_status(new_status, completion_category)
    leaving = previous_status is not None and is_completion_status(previous_status, completion_category)
    if entering:
        # First transition wins
        return completion_date if completion_date is not None else now
    if leaving:
        return None
    return completion_date


def create_task(
    data: Mapping[str, Any],
    completion_category: str = DEFAULT_COMPLETION_CATEGORY,
    now: Optional[datetime] = None,
) -> Task:
    """Create a task from direct entry.

    Args:
        data: Task fields by wire or attribute name. title, taskid and status
            are required; date and dueDate default to now; optional text
            fields default to empty string. Any completionDate is ignored.
        completion_category: Name of the completion category
        now: Creation instant (defaults to current UTC time)

    Returns:
        New Task with a fresh id

    Raises:
        BoardValidationError: if a required field is missing or a value is malformed
    """
    now = _now(now)
    attributes = _to_attributes(data)
    _require_text(attributes)

    attributes.setdefault("date", now)
    attributes.setdefault("due_date", now)
    attributes["id"] = str(uuid.uuid4())
    attributes["completion_date"] = _completion_for(
        None, attributes["status"], None, completion_category, now
    )

    try:
        task = Task(**attributes)
    except ValidationError as e:
        raise from_pydantic_error(e) from e

    logger.debug(f"Created task {task.id}: {task.title[:50]}")
    return task


def apply_status_change(
    task: Task,
    new_status: str,
    completion_category: str = DEFAULT_COMPLETION_CATEGORY,
    now: Optional[datetime] = None,
) -> Task:
    """Move a task to ``new_status``, adjusting completion_date.

    All other fields are unchanged. Used for drag-driven moves as well as
    explicit status edits.
    """
    if not isinstance(new_status, str):
        raise BoardValidationError("Task field 'status' must be a string", field="status")
    if not new_status.strip():
        raise BoardValidationError("Task is missing required field 'status'", field="status")

    completion_date = _completion_for(
        task.status, new_status, task.completion_date, completion_category, _now(now)
    )
    if completion_date != task.completion_date:
        action = "set" if completion_date is not None else "cleared"
        logger.debug(f"Task {task.id} completion date {action} on move to '{new_status}'")
    return task.model_copy(update={"status": new_status, "completion_date": completion_date})


def update_task(
    task: Task,
    patch: Mapping[str, Any],
    completion_category: str = DEFAULT_COMPLETION_CATEGORY,
    now: Optional[datetime] = None,
) -> Task:
    """Merge a partial patch into a task.

    The completion adjustment applies only when the patch changes status.
    The whole patch is validated before anything is applied.

    Raises:
        BoardValidationError: if the patch names id or completionDate, blanks
            a required field, or carries a malformed value
    """
    for key in patch:
        if key in _DERIVED_FIELDS or key in _DERIVED_FIELDS.values():
            wire = _wire_name(_DERIVED_FIELDS.get(key, key))
            raise BoardValidationError(f"Field '{wire}' cannot be patched", field=wire)

    changes = _to_attributes(patch, strict=True)
    _require_text(changes, [field for field in _REQUIRED_TEXT_FIELDS if field in changes])

    merged = {**task.model_dump(), **changes}
    if "status" in changes and changes["status"] != task.status:
        merged["completion_date"] = _completion_for(
            task.status, changes["status"], task.completion_date, completion_category, _now(now)
        )

    try:
        updated = Task(**merged)
    except ValidationError as e:
        raise from_pydantic_error(e) from e

    logger.debug(f"Updated task {task.id}: {sorted(changes)}")
    return updated


def delete_task(tasks: List[Task], task_id: str) -> List[Task]:
    """Remaining tasks after removing every record with ``task_id``."""
    return [task for task in tasks if task.id != task_id]


class TaskCandidate(BaseModel):
    """A task proposed by the text-generation collaborator (untrusted)."""

    taskid: str = Field("", description="Short descriptive title")
    desc: str = Field("", description="What needs to be done")
    status: str = Field("", description="Proposed workflow category name")
    importance: str = Field("", description="Proposed importance level name")
    days_from_now: int = Field(0, alias="daysFromNow", description="Due date offset in days")

    class Config:
        """Pydantic configuration."""
        populate_by_name = True

    @field_validator("taskid", "desc", "status", "importance", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return "" if v is None else v

    @field_validator("days_from_now", mode="before")
    @classmethod
    def _round_days(cls, v):
        if isinstance(v, float):
            return round(v)
        return v


def task_from_candidate(
    candidate: Mapping[str, Any],
    context: BoardContext,
    now: Optional[datetime] = None,
) -> Task:
    """Turn a generated candidate into a real task.

    Status and importance values outside the taxonomy fall back to the
    first non-completion category and the default importance level.

    Raises:
        BoardValidationError: if the candidate is malformed or has no usable title
    """
    now = _now(now)
    try:
        parsed = TaskCandidate.model_validate(candidate)
    except ValidationError as e:
        raise from_pydantic_error(e, record="Task candidate") from e

    settings = context.settings
    status = parsed.status
    if settings.find_category(status) is None or is_completion_status(status, context.completion_category):
        fallback = next(
            (name for name in settings.category_names()
             if not is_completion_status(name, context.completion_category)),
            None,
        )
        if fallback is None:
            raise BoardValidationError("Taxonomy has no open workflow category", field="status")
        logger.warning(f"Generated status '{status}' not usable; falling back to '{fallback}'")
        status = fallback

    importance = parsed.importance
    if settings.find_importance(importance) is None:
        fallback_importance = settings.default_importance()
        if importance:
            logger.warning(f"Generated importance '{importance}' not in taxonomy; using '{fallback_importance}'")
        importance = fallback_importance

    title = parsed.taskid or parsed.desc
    return create_task(
        {
            "taskid": parsed.taskid or title,
            "title": title,
            "desc": parsed.desc,
            "status": status,
            "importance": importance,
            "date": now,
            "dueDate": now + timedelta(days=max(parsed.days_from_now, 0)),
        },
        completion_category=context.completion_category,
        now=now,
    )
