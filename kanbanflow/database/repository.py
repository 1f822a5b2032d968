"""Repository layer for board persistence.

Writes are last-write-wins; the repositories do no conflict detection.
Subscribers receive the full current collection after every committed write.
"""

import logging
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from kanbanflow.database.models import SETTINGS_DOCUMENT_ID, SettingsDB, TaskDB
from kanbanflow.models.errors import BoardValidationError
from kanbanflow.models.task import Task
from kanbanflow.models.taxonomy import AppSettings
from kanbanflow.models.taxonomy_ops import default_settings
from kanbanflow.transfer.normalize import find_duplicate_ids

logger = logging.getLogger(__name__)


class _Subscribers:
    """Callbacks notified after committed writes."""

    def __init__(self):
        self._callbacks: List[Callable] = []

    def add(self, callback: Callable) -> Callable[[], None]:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def notify(self, value) -> None:
        for callback in list(self._callbacks):
            callback(value)


class TaskRepository:
    """Repository for Task database operations."""

    def __init__(self, db: Session):
        self.db = db
        self._subscribers = _Subscribers()

    def subscribe(self, callback: Callable[[List[Task]], None]) -> Callable[[], None]:
        """Register a callback receiving all tasks after each write.

        Returns:
            Function that removes the subscription
        """
        return self._subscribers.add(callback)

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to {action}: {type(e).__name__}: {str(e)}")
            raise
        self._subscribers.notify(self.get_all())

    def create(self, task: Task) -> Task:
        """Create a new task."""
        self.db.add(TaskDB.from_pydantic(task))
        self._commit(f"create task {task.id}")
        logger.debug(f"Created task {task.id}: {task.title[:50]}")
        return task

    def get(self, task_id: str) -> Optional[Task]:
        """Get task by ID."""
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        return task_db.to_pydantic() if task_db else None

    def get_all(self) -> List[Task]:
        """Get all tasks ordered by start date, then id."""
        tasks_db = self.db.query(TaskDB).order_by(TaskDB.date, TaskDB.id).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def update(self, task: Task) -> Task:
        """Overwrite an existing task."""
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task.id).first()
        if not task_db:
            raise ValueError(f"Task {task.id} not found")
        task_db.apply(task)
        self._commit(f"update task {task.id}")
        logger.debug(f"Updated task {task.id}: {task.title[:50]}")
        return task

    def delete(self, task_id: str) -> bool:
        """Permanently delete a task by ID."""
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        if not task_db:
            return False
        self.db.delete(task_db)
        self._commit(f"delete task {task_id}")
        logger.debug(f"Deleted task {task_id}")
        return True

    def replace_all(self, tasks: List[Task]) -> int:
        """Replace the whole task collection in one transaction.

        Raises:
            BoardValidationError: if two tasks share an id
        """
        duplicates = find_duplicate_ids(tasks)
        if duplicates:
            raise BoardValidationError(
                f"Cannot store tasks with duplicated ids: {', '.join(duplicates[:5])}",
                field="id",
            )

        self.db.query(TaskDB).delete(synchronize_session=False)
        self.db.add_all([TaskDB.from_pydantic(task) for task in tasks])
        self._commit("replace all tasks")
        logger.debug(f"Replaced task collection with {len(tasks)} tasks")
        return len(tasks)


class SettingsRepository:
    """Repository for the single taxonomy document."""

    def __init__(self, db: Session):
        self.db = db
        self._subscribers = _Subscribers()

    def subscribe(self, callback: Callable[[AppSettings], None]) -> Callable[[], None]:
        """Register a callback receiving the settings after each save."""
        return self._subscribers.add(callback)

    def get(self) -> Optional[AppSettings]:
        settings_db = self.db.query(SettingsDB).filter(SettingsDB.id == SETTINGS_DOCUMENT_ID).first()
        return settings_db.to_pydantic() if settings_db else None

    def save(self, settings: AppSettings) -> AppSettings:
        """Overwrite the settings document."""
        document = settings.to_record()
        settings_db = self.db.query(SettingsDB).filter(SettingsDB.id == SETTINGS_DOCUMENT_ID).first()
        if settings_db:
            settings_db.document = document
        else:
            self.db.add(SettingsDB(id=SETTINGS_DOCUMENT_ID, document=document))

        try:
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save settings: {type(e).__name__}: {str(e)}")
            raise
        logger.debug("Saved settings document")
        self._subscribers.notify(settings)
        return settings

    def get_or_create_default(self) -> AppSettings:
        """Load the settings, writing the starter taxonomy when none exist."""
        settings = self.get()
        if settings is None:
            logger.info("No settings found, creating default settings")
            settings = self.save(default_settings())
        return settings
