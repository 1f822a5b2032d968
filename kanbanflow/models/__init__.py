"""Data models for kanbanflow."""

from kanbanflow.models.task import Task
from kanbanflow.models.taxonomy import AppSettings, WorkflowCategory, SubCategory, ImportanceLevel, BidOrigin
from kanbanflow.models.context import BoardContext
from kanbanflow.models.errors import BoardValidationError

__all__ = [
    "Task",
    "AppSettings",
    "WorkflowCategory",
    "SubCategory",
    "ImportanceLevel",
    "BidOrigin",
    "BoardContext",
    "BoardValidationError",
]
