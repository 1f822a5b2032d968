"""SQLAlchemy database models for kanbanflow."""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON

from kanbanflow.database.database import Base
from kanbanflow.models.task import Task
from kanbanflow.models.taxonomy import AppSettings

SETTINGS_DOCUMENT_ID = "app-settings"


class TaskDB(Base):
    """Database model for Task."""

    __tablename__ = "tasks"

    id = Column(String, primary_key=True)
    taskid = Column(String, nullable=False, default="")
    title = Column(String, nullable=False)
    date = Column(DateTime, nullable=False)
    due_date = Column(DateTime, nullable=False, index=True)

    # Denormalized taxonomy references (names, not ids)
    status = Column(String, nullable=False, index=True)
    sub_status = Column(String, nullable=False, default="")
    importance = Column(String, nullable=False, default="")
    bid_origin = Column(String, nullable=False, default="")

    desc = Column(String, nullable=False, default="")
    remarks = Column(String, nullable=False, default="")
    completion_date = Column(DateTime, nullable=True)

    @classmethod
    def from_pydantic(cls, task: Task) -> "TaskDB":
        return cls(**task.model_dump())

    def apply(self, task: Task) -> None:
        """Copy every field of ``task`` onto this row (id excluded)."""
        for field, value in task.model_dump(exclude={"id"}).items():
            setattr(self, field, value)

    def to_pydantic(self) -> Task:
        return Task(
            id=self.id,
            taskid=self.taskid,
            title=self.title,
            date=self.date,
            due_date=self.due_date,
            status=self.status,
            sub_status=self.sub_status,
            importance=self.importance,
            bid_origin=self.bid_origin,
            desc=self.desc,
            remarks=self.remarks,
            completion_date=self.completion_date,
        )


class SettingsDB(Base):
    """Database model for the taxonomy document."""

    __tablename__ = "settings"

    id = Column(String, primary_key=True, default=SETTINGS_DOCUMENT_ID)
    document = Column(JSON, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self) -> AppSettings:
        return AppSettings.model_validate(self.document)
