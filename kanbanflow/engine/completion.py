"""Completion state for kanbanflow tasks.

A task is done when its status names the completion category. The name is
passed in explicitly (usually from BoardContext.completion_category) so a
taxonomy rename only needs a new context, not code changes.
"""

from typing import List

from kanbanflow.models.context import DEFAULT_COMPLETION_CATEGORY
from kanbanflow.models.task import Task


def is_completion_status(status: str, completion_category: str = DEFAULT_COMPLETION_CATEGORY) -> bool:
    """Check whether a status value names the completion category (case-insensitive)."""
    return (status or "").casefold() == completion_category.casefold()


def is_done(task: Task, completion_category: str = DEFAULT_COMPLETION_CATEGORY) -> bool:
    """Check whether a task is in the completion category."""
    return is_completion_status(task.status, completion_category)


def filter_active(tasks: List[Task], completion_category: str = DEFAULT_COMPLETION_CATEGORY) -> List[Task]:
    """Tasks not in the completion category, in input order."""
    return [task for task in tasks if not is_done(task, completion_category)]


def filter_completed(tasks: List[Task], completion_category: str = DEFAULT_COMPLETION_CATEGORY) -> List[Task]:
    """Tasks in the completion category, in input order."""
    return [task for task in tasks if is_done(task, completion_category)]
