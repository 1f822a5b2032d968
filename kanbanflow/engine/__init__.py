"""Filter and aggregation engine for kanbanflow."""

from kanbanflow.engine.completion import is_done, filter_active, filter_completed
from kanbanflow.engine.due_windows import (
    KanbanFilter,
    BoardSummary,
    filter_overdue,
    filter_due_today,
    filter_due_this_week,
    apply_kanban_filter,
    board_summary,
)
from kanbanflow.engine.aggregation import (
    DistributionSlice,
    WeekCount,
    count_by_category,
    category_distribution,
    origin_distribution,
    importance_distribution,
    weekly_completion_trend,
    group_by_column,
)
from kanbanflow.engine.search import SortDirection, search_and_sort, completed_tasks_report

__all__ = [
    "is_done",
    "filter_active",
    "filter_completed",
    "KanbanFilter",
    "BoardSummary",
    "filter_overdue",
    "filter_due_today",
    "filter_due_this_week",
    "apply_kanban_filter",
    "board_summary",
    "DistributionSlice",
    "WeekCount",
    "count_by_category",
    "category_distribution",
    "origin_distribution",
    "importance_distribution",
    "weekly_completion_trend",
    "group_by_column",
    "SortDirection",
    "search_and_sort",
    "completed_tasks_report",
]
