"""Search and sort for task tables.

Sorting is stable and total: tasks missing a date sort as the Unix epoch,
tasks missing a string value sort as the empty string. Ties keep input order
in both directions.
"""

from enum import Enum
from typing import Any, Callable, List, Optional, Union

from kanbanflow.engine.completion import filter_completed
from kanbanflow.models.constants import SORT_EPOCH
from kanbanflow.models.context import DEFAULT_COMPLETION_CATEGORY
from kanbanflow.models.errors import BoardValidationError
from kanbanflow.models.task import Task


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


# Wire name -> model attribute
_DATE_KEYS = {
    "date": "date",
    "dueDate": "due_date",
    "completionDate": "completion_date",
}
_TEXT_KEYS = {
    "title": "title",
    "taskid": "taskid",
    "remarks": "remarks",
    "status": "status",
    "subStatus": "sub_status",
    "importance": "importance",
    "bidOrigin": "bid_origin",
    "desc": "desc",
}


def _sort_key_for(sort_key: str) -> Callable[[Task], Any]:
    for mapping, missing in ((_DATE_KEYS, SORT_EPOCH), (_TEXT_KEYS, "")):
        for wire_name, attribute in mapping.items():
            if sort_key in (wire_name, attribute):
                return lambda task, attribute=attribute, missing=missing: (
                    getattr(task, attribute) or missing
                )
    raise BoardValidationError(f"Unsupported sort key '{sort_key}'", field="sortKey")


def matches_search(task: Task, search_term: Optional[str]) -> bool:
    """Case-insensitive substring match against title and taskid."""
    if not search_term:
        return True
    needle = search_term.casefold()
    return needle in task.title.casefold() or needle in task.taskid.casefold()


def search_and_sort(
    tasks: List[Task],
    search_term: Optional[str] = None,
    sort_key: Optional[str] = None,
    direction: Union[SortDirection, str] = SortDirection.ASC,
) -> List[Task]:
    """Filter tasks by search term, then stable-sort by ``sort_key``.

    Args:
        tasks: Tasks to search
        search_term: Substring to look for in title or taskid (None/empty matches all)
        sort_key: Field to sort by, wire or attribute name (None keeps input order)
        direction: Ascending or descending

    Returns:
        New list of matching tasks

    Raises:
        BoardValidationError: if sort_key is not a sortable field
    """
    direction = SortDirection(direction)
    result = [task for task in tasks if matches_search(task, search_term)]
    if not sort_key:
        return result
    key = _sort_key_for(sort_key)
    # sorted() with reverse=True keeps equal elements in input order
    return sorted(result, key=key, reverse=direction == SortDirection.DESC)


def completed_tasks_report(
    tasks: List[Task],
    search_term: Optional[str] = None,
    sort_key: Optional[str] = None,
    direction: Union[SortDirection, str] = SortDirection.ASC,
    completion_category: str = DEFAULT_COMPLETION_CATEGORY,
) -> List[Task]:
    """Rows for the completed-tasks table."""
    return search_and_sort(filter_completed(tasks, completion_category), search_term, sort_key, direction)
