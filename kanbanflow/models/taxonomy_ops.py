"""Taxonomy mutations and lookups for kanbanflow.

Mutations are list operations keyed by id that return a new AppSettings.
They never touch tasks: renaming a category silently moves the tasks that
reference it by name, and deleting one leaves those tasks uncategorized.
"""

import logging
import uuid
from enum import Enum
from typing import List, Optional, Union

from kanbanflow.models.constants import COMPLETION_CATEGORY_SYNONYMS
from kanbanflow.models.errors import BoardValidationError
from kanbanflow.models.task import Task
from kanbanflow.models.taxonomy import (
    AppSettings,
    BidOrigin,
    ImportanceLevel,
    SubCategory,
    WorkflowCategory,
)

logger = logging.getLogger(__name__)

TaxonomyItem = Union[WorkflowCategory, SubCategory, ImportanceLevel, BidOrigin]


class TaxonomyKind(str, Enum):
    """The four taxonomy lists, named by their AppSettings attribute."""
    WORKFLOW_CATEGORIES = "workflow_categories"
    SUB_CATEGORIES = "sub_categories"
    IMPORTANCE_LEVELS = "importance_levels"
    BID_ORIGINS = "bid_origins"


# Lists that must keep at least one entry for the board to be usable
_NON_EMPTY_KINDS = {
    TaxonomyKind.WORKFLOW_CATEGORIES: "workflowCategories",
    TaxonomyKind.IMPORTANCE_LEVELS: "importanceLevels",
}

_ITEM_TYPES = {
    TaxonomyKind.WORKFLOW_CATEGORIES: WorkflowCategory,
    TaxonomyKind.SUB_CATEGORIES: SubCategory,
    TaxonomyKind.IMPORTANCE_LEVELS: ImportanceLevel,
    TaxonomyKind.BID_ORIGINS: BidOrigin,
}


def default_settings() -> AppSettings:
    """Starter taxonomy used when no settings document exists yet."""
    return AppSettings(
        workflow_categories=[
            WorkflowCategory(name="Not Started", color="#EF4444"),
            WorkflowCategory(name="In Progress", color="#F97316"),
            WorkflowCategory(name="Under Review", color="#EAB308"),
            WorkflowCategory(name="Done", color="#22C55E"),
        ],
        sub_categories=[
            SubCategory(name="Design", parent_category="In Progress"),
            SubCategory(name="Development", parent_category="In Progress"),
            SubCategory(name="QA", parent_category="Under Review"),
        ],
        importance_levels=[
            ImportanceLevel(name="High", color="#DC2626"),
            ImportanceLevel(name="Medium", color="#F59E0B"),
            ImportanceLevel(name="Low", color="#10B981"),
        ],
        bid_origins=[
            BidOrigin(name="Client Request"),
            BidOrigin(name="Internal"),
            BidOrigin(name="Referral"),
        ],
    )


def _check_item_type(kind: TaxonomyKind, item: TaxonomyItem) -> None:
    expected = _ITEM_TYPES[kind]
    if not isinstance(item, expected):
        raise BoardValidationError(
            f"Expected {expected.__name__} for {kind.value}, got {type(item).__name__}"
        )


def add_item(settings: AppSettings, kind: TaxonomyKind, item: TaxonomyItem) -> AppSettings:
    """Append an item to one taxonomy list.

    A fresh id is assigned when the item's id collides with an existing entry.
    """
    kind = TaxonomyKind(kind)
    _check_item_type(kind, item)
    items = list(getattr(settings, kind.value))
    if any(existing.id == item.id for existing in items):
        item = item.model_copy(update={"id": str(uuid.uuid4())})
    items.append(item)
    logger.debug(f"Added {kind.value} entry {item.id}: {item.name}")
    return settings.model_copy(update={kind.value: items})


def update_item(settings: AppSettings, kind: TaxonomyKind, item: TaxonomyItem) -> AppSettings:
    """Replace the entry with the same id in one taxonomy list."""
    kind = TaxonomyKind(kind)
    _check_item_type(kind, item)
    items = list(getattr(settings, kind.value))
    for index, existing in enumerate(items):
        if existing.id == item.id:
            items[index] = item
            return settings.model_copy(update={kind.value: items})
    raise BoardValidationError(f"{kind.value} entry {item.id} not found", field="id")


def delete_item(settings: AppSettings, kind: TaxonomyKind, item_id: str) -> AppSettings:
    """Remove an entry by id. Unknown ids are a no-op.

    Raises:
        BoardValidationError: if the deletion would empty the workflow
            categories or importance levels
    """
    kind = TaxonomyKind(kind)
    items = getattr(settings, kind.value)
    remaining = [existing for existing in items if existing.id != item_id]
    if len(remaining) == len(items):
        return settings
    if not remaining and kind in _NON_EMPTY_KINDS:
        raise BoardValidationError(
            f"Cannot delete the last remaining entry of {_NON_EMPTY_KINDS[kind]}",
            field=_NON_EMPTY_KINDS[kind],
        )
    logger.debug(f"Deleted {kind.value} entry {item_id}")
    return settings.model_copy(update={kind.value: remaining})


def resolve_completion_category(settings: AppSettings, preferred: str) -> str:
    """Resolve the completion category name once for a taxonomy.

    Order: a category matching ``preferred`` case-insensitively, then the
    first category matching a recognized synonym, then ``preferred`` itself.
    """
    wanted = preferred.casefold()
    for category in settings.workflow_categories:
        if category.name.casefold() == wanted:
            return category.name

    synonyms = {name.casefold() for name in COMPLETION_CATEGORY_SYNONYMS}
    for category in settings.workflow_categories:
        if category.name.casefold() in synonyms:
            logger.warning(
                f"Completion category '{preferred}' not in taxonomy; using '{category.name}' instead"
            )
            return category.name

    return preferred


def is_uncategorized(task: Task, settings: AppSettings) -> bool:
    """True when the task's status no longer names a workflow category."""
    return settings.find_category(task.status) is None


def selectable_sub_categories(settings: AppSettings, status: Optional[str]) -> List[SubCategory]:
    """Sub-status options offered for a task in the given status."""
    return settings.sub_categories_of(status)
