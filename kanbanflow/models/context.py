"""Board context: the explicit configuration threaded through engine calls."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from kanbanflow.models.constants import DEFAULT_COMPLETION_CATEGORY_NAME
from kanbanflow.models.taxonomy import AppSettings
from kanbanflow.models.taxonomy_ops import resolve_completion_category

load_dotenv()

# Preferred completion category name (resolved against the taxonomy per context)
DEFAULT_COMPLETION_CATEGORY = os.getenv("KANBANFLOW_COMPLETION_CATEGORY", DEFAULT_COMPLETION_CATEGORY_NAME)


class BoardContext(BaseModel):
    """Taxonomy plus the completion category name resolved from it."""

    settings: AppSettings = Field(default_factory=AppSettings, description="Current taxonomy")
    completion_category: str = Field(
        DEFAULT_COMPLETION_CATEGORY, description="Workflow category name that marks finished work"
    )

    @classmethod
    def from_settings(cls, settings: AppSettings, preferred: Optional[str] = None) -> "BoardContext":
        """Build a context, resolving the completion category once."""
        preferred = preferred or DEFAULT_COMPLETION_CATEGORY
        return cls(
            settings=settings,
            completion_category=resolve_completion_category(settings, preferred),
        )
