"""Import/export of whole boards as JSON documents.

The file format is ``{"settings": AppSettings, "tasks": [Task, ...]}`` with
camelCase keys and ISO-8601 instants. Exports are read back directly;
anything that does not look canonical goes through normalize().
"""

import json
import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional

from pydantic import ValidationError

from kanbanflow.models.context import DEFAULT_COMPLETION_CATEGORY
from kanbanflow.models.errors import BoardValidationError, from_pydantic_error
from kanbanflow.models.task import Task
from kanbanflow.models.taxonomy import AppSettings
from kanbanflow.transfer.normalize import NormalizedData, normalize

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "kanbanflow_data.json"


def export_data(settings: AppSettings, tasks: List[Task]) -> dict:
    """Serialize a board to the export document shape."""
    return {
        "settings": settings.to_record(),
        "tasks": [task.to_record() for task in tasks],
    }


def dumps(settings: AppSettings, tasks: List[Task]) -> str:
    return json.dumps(export_data(settings, tasks), indent=2)


def is_canonical(payload: Any) -> bool:
    """True when the payload looks like a kanbanflow export."""
    if not isinstance(payload, Mapping):
        return False
    settings = payload.get("settings")
    return (
        isinstance(settings, Mapping)
        and isinstance(settings.get("workflowCategories"), list)
        and isinstance(payload.get("tasks", []), list)
    )


def import_data(
    payload: Any,
    now: Optional[datetime] = None,
    completion_category: str = DEFAULT_COMPLETION_CATEGORY,
    reassign_duplicate_ids: bool = False,
) -> NormalizedData:
    """Load board data for a bulk replace.

    Canonical payloads are validated as-is; a canonical payload that fails
    validation is rejected rather than silently normalized. Everything else
    is normalized.

    Raises:
        BoardValidationError: if a canonical payload is invalid
    """
    if not is_canonical(payload):
        logger.debug("Import payload is not canonical; normalizing")
        return normalize(
            payload,
            now=now,
            completion_category=completion_category,
            reassign_duplicate_ids=reassign_duplicate_ids,
        )

    try:
        settings = AppSettings.model_validate(payload["settings"])
    except ValidationError as e:
        raise from_pydantic_error(e, record="Settings") from e
    if not settings.workflow_categories or not settings.importance_levels:
        # The board needs at least one of each; let the transform fill the gaps
        logger.debug("Canonical payload has an empty taxonomy list; normalizing")
        return normalize(
            payload,
            now=now,
            completion_category=completion_category,
            reassign_duplicate_ids=reassign_duplicate_ids,
        )

    tasks: List[Task] = []
    for index, raw in enumerate(payload.get("tasks", [])):
        try:
            tasks.append(Task.model_validate(raw))
        except ValidationError as e:
            error = from_pydantic_error(e)
            raise BoardValidationError(f"Task #{index}: {error}", field=error.field) from e

    logger.debug(f"Loaded canonical export with {len(tasks)} tasks")
    return NormalizedData(settings=settings, tasks=tasks)


def loads(
    text: str,
    now: Optional[datetime] = None,
    completion_category: str = DEFAULT_COMPLETION_CATEGORY,
) -> NormalizedData:
    """Parse a JSON document and import it.

    Raises:
        BoardValidationError: if the text is not valid JSON or fails validation
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise BoardValidationError(f"Invalid import file: {e.msg}") from e
    return import_data(payload, now=now, completion_category=completion_category)


def clear_all(settings: AppSettings) -> NormalizedData:
    """Replace-set that removes every task and keeps the taxonomy."""
    return NormalizedData(settings=settings, tasks=[])
