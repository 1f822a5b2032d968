"""Rollups over a task set: column counts, distributions and completion trend.

Counting matches task fields against taxonomy names exactly. Tasks whose
references no longer resolve are simply not counted under any entry.
"""

from collections import Counter
from datetime import date
from typing import Dict, Iterable, Iterator, List, NamedTuple, Sequence, Tuple

from pydantic import BaseModel, Field

from kanbanflow.engine.completion import filter_active
from kanbanflow.engine.due_windows import week_start_date
from kanbanflow.models.context import DEFAULT_COMPLETION_CATEGORY
from kanbanflow.models.task import Task
from kanbanflow.models.taxonomy import AppSettings, BidOrigin, ImportanceLevel, WorkflowCategory


class DistributionSlice(BaseModel):
    """One non-empty slice of a distribution chart."""

    name: str = Field(..., description="Taxonomy entry name")
    value: int = Field(..., description="Number of tasks")
    color: str = Field("", description="Entry colour, when the taxonomy defines one")


class WeekCount(NamedTuple):
    week_start: date
    count: int


class WeeklyCompletionTrend:
    """Completions per week, ascending by week start.

    Iterating recomputes from the task snapshot every time, so the sequence
    can be walked any number of times and holds no derived state.
    """

    def __init__(self, tasks: Iterable[Task]):
        self._tasks: Tuple[Task, ...] = tuple(tasks)

    def __iter__(self) -> Iterator[WeekCount]:
        counts = Counter(
            week_start_date(task.completion_date)
            for task in self._tasks
            if task.completion_date is not None
        )
        for week_start in sorted(counts):
            yield WeekCount(week_start, counts[week_start])

    def __repr__(self) -> str:
        return f"WeeklyCompletionTrend({list(self)!r})"


def count_by_category(tasks: List[Task], categories: Sequence[WorkflowCategory]) -> Dict[str, int]:
    """Count tasks per category name, in taxonomy order, zeros included."""
    counts = Counter(task.status for task in tasks)
    return {category.name: counts.get(category.name, 0) for category in categories}


def category_distribution(
    tasks: List[Task],
    categories: Sequence[WorkflowCategory],
    completion_category: str = DEFAULT_COMPLETION_CATEGORY,
) -> List[DistributionSlice]:
    """Active task distribution across categories, empty categories dropped."""
    counts = count_by_category(filter_active(tasks, completion_category), categories)
    return [
        DistributionSlice(name=category.name, value=counts[category.name], color=category.color)
        for category in categories
        if counts[category.name] > 0
    ]


def origin_distribution(tasks: List[Task], origins: Sequence[BidOrigin]) -> List[DistributionSlice]:
    """Tasks per origin name, zero-count origins excluded."""
    counts = Counter(task.bid_origin for task in tasks)
    return [
        DistributionSlice(name=origin.name, value=counts[origin.name])
        for origin in origins
        if counts[origin.name] > 0
    ]


def importance_distribution(tasks: List[Task], levels: Sequence[ImportanceLevel]) -> List[DistributionSlice]:
    """Tasks per importance level, zero-count levels excluded."""
    counts = Counter(task.importance for task in tasks)
    return [
        DistributionSlice(name=level.name, value=counts[level.name], color=level.color)
        for level in levels
        if counts[level.name] > 0
    ]


def weekly_completion_trend(tasks: Iterable[Task]) -> WeeklyCompletionTrend:
    """Group tasks with a completion date by the week containing it."""
    return WeeklyCompletionTrend(tasks)


def group_by_column(tasks: List[Task], settings: AppSettings) -> Dict[str, List[Task]]:
    """Split tasks into board columns.

    Keys follow taxonomy order; tasks whose status names no category land in
    the ``None`` bucket, which is only present when non-empty.
    """
    columns: Dict = {name: [] for name in settings.category_names()}
    orphans: List[Task] = []
    for task in tasks:
        if task.status in columns:
            columns[task.status].append(task)
        else:
            orphans.append(task)
    if orphans:
        columns[None] = orphans
    return columns
