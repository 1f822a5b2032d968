"""Taxonomy data models for kanbanflow.

The taxonomy is the vocabulary tasks are filed under: workflow categories
(board columns), sub-categories scoped to one parent category, importance
levels and origins. Tasks refer to entries by name, so every lookup here is
by name and returns None on a miss.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field


def _new_id() -> str:
    return str(uuid.uuid4())


class WorkflowCategory(BaseModel):
    """One Kanban column."""

    id: str = Field(default_factory=_new_id, description="Unique category identifier")
    name: str = Field(..., description="Display name; the value tasks store in status")
    color: str = Field("", description="Display colour")


class SubCategory(BaseModel):
    """A finer-grained status scoped to a parent workflow category."""

    id: str = Field(default_factory=_new_id, description="Unique sub-category identifier")
    name: str = Field(..., description="Display name")
    parent_category: str = Field(
        "", alias="parentCategory", description="Name (not id) of the parent workflow category"
    )

    class Config:
        """Pydantic configuration."""
        populate_by_name = True


class ImportanceLevel(BaseModel):
    """Importance tag. Ordered by insertion, not ranked."""

    id: str = Field(default_factory=_new_id, description="Unique importance identifier")
    name: str = Field(..., description="Display name")
    color: str = Field("", description="Display colour")


class BidOrigin(BaseModel):
    """Free-form provenance tag."""

    id: str = Field(default_factory=_new_id, description="Unique origin identifier")
    name: str = Field(..., description="Display name")


class AppSettings(BaseModel):
    """The taxonomy aggregate."""

    workflow_categories: List[WorkflowCategory] = Field(default_factory=list, alias="workflowCategories")
    sub_categories: List[SubCategory] = Field(default_factory=list, alias="subCategories")
    importance_levels: List[ImportanceLevel] = Field(default_factory=list, alias="importanceLevels")
    bid_origins: List[BidOrigin] = Field(default_factory=list, alias="bidOrigins")

    class Config:
        """Pydantic configuration."""
        populate_by_name = True

    def find_category(self, name: Optional[str]) -> Optional[WorkflowCategory]:
        """Find a workflow category by exact name."""
        for category in self.workflow_categories:
            if category.name == name:
                return category
        return None

    def sub_categories_of(self, status_name: Optional[str]) -> List[SubCategory]:
        """Sub-categories whose parent is the given workflow category name."""
        return [sub for sub in self.sub_categories if sub.parent_category == status_name]

    def find_importance(self, name: Optional[str]) -> Optional[ImportanceLevel]:
        """Find an importance level by exact name."""
        for level in self.importance_levels:
            if level.name == name:
                return level
        return None

    def find_origin(self, name: Optional[str]) -> Optional[BidOrigin]:
        """Find an origin by exact name."""
        for origin in self.bid_origins:
            if origin.name == name:
                return origin
        return None

    def category_names(self) -> List[str]:
        return [category.name for category in self.workflow_categories]

    def importance_names(self) -> List[str]:
        return [level.name for level in self.importance_levels]

    def origin_names(self) -> List[str]:
        return [origin.name for origin in self.bid_origins]

    def default_importance(self) -> str:
        """Importance assigned when none is given: second level, else first, else empty."""
        if len(self.importance_levels) > 1:
            return self.importance_levels[1].name
        if self.importance_levels:
            return self.importance_levels[0].name
        return ""

    def to_record(self) -> dict:
        """Serialize to the wire shape (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)
