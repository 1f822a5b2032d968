"""Import normalization for kanbanflow.

Converts loosely-structured board data (legacy exports, spreadsheets turned
into JSON, hand-edited files) into the canonical AppSettings + Task model.
Field names vary between sources, so each value is looked up under every
spelling seen in the wild.

Running the transform on its own exported output is a no-op apart from
freshly generated taxonomy ids.
"""

import logging
import uuid
from collections import Counter
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional, Set

from pydantic import BaseModel, Field

from kanbanflow.models.constants import (
    COMPLETION_CATEGORY_COLOR,
    COMPLETION_CATEGORY_SYNONYMS,
    UNTITLED_TASK_TITLE,
)
from kanbanflow.models.context import DEFAULT_COMPLETION_CATEGORY
from kanbanflow.models.task import Task, as_naive_utc, parse_instant
from kanbanflow.models.taxonomy import (
    AppSettings,
    BidOrigin,
    ImportanceLevel,
    SubCategory,
    WorkflowCategory,
)
from kanbanflow.models.taxonomy_ops import resolve_completion_category

logger = logging.getLogger(__name__)


class NormalizedData(BaseModel):
    """Canonical board data produced by the transform."""

    settings: AppSettings = Field(default_factory=AppSettings)
    tasks: List[Task] = Field(default_factory=list)


def _first(record: Mapping[str, Any], *keys: str) -> Any:
    """First present, non-empty value among ``keys``."""
    for key in keys:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _records(container: Mapping[str, Any], *keys: str) -> List[Mapping[str, Any]]:
    value = _first(container, *keys)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def _taxonomy_records(container: Mapping[str, Any], *keys: str) -> List[Mapping[str, Any]]:
    """Like _records, but a bare string entry is read as ``{"name": entry}``."""
    value = _first(container, *keys)
    if not isinstance(value, list):
        return []
    records: List[Mapping[str, Any]] = []
    for item in value:
        if isinstance(item, str):
            records.append({"name": item})
        elif isinstance(item, Mapping):
            records.append(item)
    return records


def _new_id() -> str:
    return str(uuid.uuid4())


def normalize_settings(
    raw: Optional[Mapping[str, Any]],
    completion_category: str = DEFAULT_COMPLETION_CATEGORY,
) -> AppSettings:
    """Build a taxonomy from loose settings data.

    Every entry gets a fresh id. Entries may be records or bare names. A
    completion category is appended only when neither ``completion_category``
    nor a recognized synonym names an imported category.
    """
    raw = raw if isinstance(raw, Mapping) else {}

    categories = [
        WorkflowCategory(
            id=_new_id(),
            name=_text(_first(item, "name")),
            color=_text(_first(item, "color", "background")),
        )
        for item in _taxonomy_records(raw, "workflowCategories", "workflow_categories", "statuses")
    ]
    sub_categories = [
        SubCategory(
            id=_new_id(),
            name=_text(_first(item, "name")),
            parent_category=_text(_first(item, "parentCategory", "parent_category", "parent")),
        )
        for item in _taxonomy_records(raw, "subCategories", "sub_categories", "subStatuses")
    ]
    importance_levels = [
        ImportanceLevel(
            id=_new_id(),
            name=_text(_first(item, "name")),
            color=_text(_first(item, "color", "background")),
        )
        for item in _taxonomy_records(raw, "importanceLevels", "importance_levels")
    ]
    bid_origins = [
        BidOrigin(id=_new_id(), name=_text(_first(item, "name")))
        for item in _taxonomy_records(raw, "bidOrigins", "bid_origins")
    ]

    resolved = resolve_completion_category(AppSettings(workflow_categories=categories), completion_category)
    wanted = resolved.casefold()
    if not any(category.name.casefold() == wanted for category in categories):
        logger.debug(f"No '{resolved}' category in imported taxonomy; adding one")
        categories.append(
            WorkflowCategory(id=_new_id(), name=resolved, color=COMPLETION_CATEGORY_COLOR)
        )

    return AppSettings(
        workflow_categories=categories,
        sub_categories=sub_categories,
        importance_levels=importance_levels,
        bid_origins=bid_origins,
    )


def _completion_names(completion_category: str) -> Set[str]:
    return {completion_category.casefold()} | {name.casefold() for name in COMPLETION_CATEGORY_SYNONYMS}


def normalize_task(
    raw: Mapping[str, Any],
    settings: AppSettings,
    now: datetime,
    completion_category: str = DEFAULT_COMPLETION_CATEGORY,
) -> Task:
    """Normalize one loose task record against an already-normalized taxonomy.

    ``completion_category`` is the completion name already resolved against
    ``settings``; statuses naming any completion synonym are filed under it.
    """
    taskid = _text(_first(raw, "taskid", "taskId", "task_id"))
    desc = _text(_first(raw, "desc", "description"))

    status = _text(_first(raw, "status"))
    known = settings.find_category(status) is not None
    if status and not known and status.casefold() in _completion_names(completion_category):
        status = completion_category
    if not status or settings.find_category(status) is None:
        status = settings.workflow_categories[0].name if settings.workflow_categories else ""

    importance = _text(_first(raw, "importance")) or settings.default_importance()

    return Task(
        id=_text(_first(raw, "id")) or _new_id(),
        taskid=taskid,
        title=_text(_first(raw, "title")) or desc or taskid or UNTITLED_TASK_TITLE,
        date=parse_instant(_first(raw, "date")) or now,
        due_date=parse_instant(_first(raw, "dueDate", "due_date")) or now,
        status=status,
        sub_status=_text(_first(raw, "subStatus", "sub_status")),
        importance=importance,
        bid_origin=_text(_first(raw, "bidOrigin", "bid_origin")),
        desc=desc,
        remarks=_text(_first(raw, "remarks")),
        completion_date=parse_instant(_first(raw, "completionDate", "completion_date")),
    )


def find_duplicate_ids(tasks: Iterable[Task]) -> List[str]:
    """Task ids carried by more than one record, in first-seen order."""
    counts = Counter(task.id for task in tasks)
    return [task_id for task_id, count in counts.items() if count > 1]


def _reassign_duplicates(tasks: List[Task]) -> List[Task]:
    seen = set()
    result: List[Task] = []
    for task in tasks:
        if task.id in seen:
            task = task.model_copy(update={"id": _new_id()})
        seen.add(task.id)
        result.append(task)
    return result


def normalize(
    external: Any,
    now: Optional[datetime] = None,
    completion_category: str = DEFAULT_COMPLETION_CATEGORY,
    reassign_duplicate_ids: bool = False,
) -> NormalizedData:
    """Convert loose external data into canonical settings and tasks.

    Args:
        external: Object loosely shaped like ``{settings: {...}, tasks: [...]}``
        now: Import instant used for missing or unparseable dates
        completion_category: Name of the completion category to guarantee
        reassign_duplicate_ids: Give later records sharing an id a fresh one
            (by default duplicates are preserved verbatim)

    Returns:
        NormalizedData with one task per input task record
    """
    now = as_naive_utc(now) if now is not None else datetime.utcnow()
    external = external if isinstance(external, Mapping) else {}

    settings = normalize_settings(external.get("settings"), completion_category)
    resolved = resolve_completion_category(settings, completion_category)
    tasks = [normalize_task(raw, settings, now, resolved) for raw in _records(external, "tasks")]

    duplicates = find_duplicate_ids(tasks)
    if duplicates:
        if reassign_duplicate_ids:
            tasks = _reassign_duplicates(tasks)
            logger.warning(f"Reassigned ids for {len(duplicates)} duplicated task id(s)")
        else:
            logger.warning(f"Imported data contains {len(duplicates)} duplicated task id(s); preserved as-is")

    logger.debug(f"Normalized {len(tasks)} tasks and {len(settings.workflow_categories)} categories")
    return NormalizedData(settings=settings, tasks=tasks)
