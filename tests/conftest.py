"""Pytest fixtures and configuration for kanbanflow tests."""

import pytest
import uuid
from datetime import datetime, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from kanbanflow.database.database import Base
from kanbanflow.database.repository import TaskRepository, SettingsRepository
from kanbanflow.models.context import BoardContext
from kanbanflow.models.task import Task
from kanbanflow.models.taxonomy import (
    AppSettings,
    WorkflowCategory,
    SubCategory,
    ImportanceLevel,
    BidOrigin,
)


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture
def now():
    """Fixed reference instant: Wednesday 2025-07-16 10:30 UTC."""
    return datetime(2025, 7, 16, 10, 30, 0)


@pytest.fixture
def sample_settings():
    """Taxonomy with a 'Done' completion category."""
    return AppSettings(
        workflow_categories=[
            WorkflowCategory(id="cat-1", name="Not Started", color="#EF4444"),
            WorkflowCategory(id="cat-2", name="In Progress", color="#F97316"),
            WorkflowCategory(id="cat-3", name="Done", color="#22C55E"),
        ],
        sub_categories=[
            SubCategory(id="sub-1", name="Design", parent_category="In Progress"),
            SubCategory(id="sub-2", name="QA", parent_category="In Progress"),
            SubCategory(id="sub-3", name="On Tray", parent_category="Not Started"),
        ],
        importance_levels=[
            ImportanceLevel(id="imp-1", name="High", color="#DC2626"),
            ImportanceLevel(id="imp-2", name="Low", color="#10B981"),
        ],
        bid_origins=[
            BidOrigin(id="org-1", name="ETIMAD"),
            BidOrigin(id="org-2", name="NUPCO"),
            BidOrigin(id="org-3", name="SALES"),
        ],
    )


@pytest.fixture
def context(sample_settings):
    """Board context resolved from the sample taxonomy."""
    return BoardContext.from_settings(sample_settings, preferred="Done")


@pytest.fixture
def sample_task_base(now):
    """Base task data for creating test tasks.

    Returns a dict with default task attributes that can be overridden.
    """
    return {
        "id": str(uuid.uuid4()),
        "taskid": "Q-169/25072908",
        "title": "Prepare quotation",
        "date": now - timedelta(days=2),
        "due_date": now + timedelta(days=1),
        "status": "Not Started",
        "sub_status": "",
        "importance": "High",
        "bid_origin": "ETIMAD",
        "desc": "Quotation for spare parts",
        "remarks": "",
        "completion_date": None,
    }


@pytest.fixture
def sample_task(sample_task_base):
    """Create a sample Task object for testing."""
    return Task(**sample_task_base)


@pytest.fixture
def make_task(sample_task_base):
    """Factory building tasks from the base data with overrides."""
    def _make(**overrides):
        return Task(**{**sample_task_base, "id": str(uuid.uuid4()), **overrides})
    return _make


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    from kanbanflow.database import models  # noqa: F401

    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def task_repository(db_session: Session):
    """Create a TaskRepository instance for testing."""
    return TaskRepository(db_session)


@pytest.fixture
def settings_repository(db_session: Session):
    """Create a SettingsRepository instance for testing."""
    return SettingsRepository(db_session)
