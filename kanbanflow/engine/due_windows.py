"""Due-window filters for kanbanflow.

All comparisons use the caller-supplied ``now``; nothing here reads the
clock. Weeks run Sunday 00:00 through Saturday 23:59:59.999999 and the same
boundaries are used by the completion trend.
"""

from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import List, Union

from pydantic import BaseModel, Field

from kanbanflow.engine.completion import filter_active, filter_completed, is_done
from kanbanflow.models.constants import WEEK_START_WEEKDAY
from kanbanflow.models.context import BoardContext, DEFAULT_COMPLETION_CATEGORY
from kanbanflow.models.task import Task, as_naive_utc


class KanbanFilter(str, Enum):
    """Board filter selector."""
    ALL = "all"
    ACTIVE = "active"
    OVERDUE = "overdue"
    DUE_TODAY = "due-today"
    DUE_THIS_WEEK = "due-this-week"
    COMPLETED = "completed"


class BoardSummary(BaseModel):
    """Headline counts for the board and dashboard."""

    total: int = Field(0, description="All tasks")
    active: int = Field(0, description="Tasks not in the completion category")
    completed: int = Field(0, description="Tasks in the completion category")
    overdue: int = Field(0, description="Active tasks due before today")
    due_today: int = Field(0, description="Active tasks due today")
    due_this_week: int = Field(0, description="Active tasks due this week")


def start_of_day(now: datetime) -> datetime:
    return datetime.combine(as_naive_utc(now).date(), time.min)


def end_of_day(now: datetime) -> datetime:
    return datetime.combine(as_naive_utc(now).date(), time.max)


def week_start_date(day: Union[date, datetime]) -> date:
    """Calendar date of the Sunday starting the week containing ``day``."""
    if isinstance(day, datetime):
        day = as_naive_utc(day).date()
    offset = (day.weekday() - WEEK_START_WEEKDAY) % 7
    return day - timedelta(days=offset)


def start_of_week(now: datetime) -> datetime:
    return datetime.combine(week_start_date(now), time.min)


def end_of_week(now: datetime) -> datetime:
    return datetime.combine(week_start_date(now) + timedelta(days=6), time.max)


def filter_overdue(
    tasks: List[Task],
    now: datetime,
    completion_category: str = DEFAULT_COMPLETION_CATEGORY,
) -> List[Task]:
    """Active tasks whose due date is before the start of today."""
    cutoff = start_of_day(now)
    return [
        task for task in tasks
        if not is_done(task, completion_category) and task.due_date < cutoff
    ]


def filter_due_today(tasks: List[Task], now: datetime) -> List[Task]:
    """Tasks due on the same calendar day as ``now``."""
    today = as_naive_utc(now).date()
    return [task for task in tasks if task.due_date.date() == today]


def filter_due_this_week(tasks: List[Task], now: datetime) -> List[Task]:
    """Tasks due within the current Sunday-to-Saturday week (inclusive)."""
    first, last = start_of_week(now), end_of_week(now)
    return [task for task in tasks if first <= task.due_date <= last]


def apply_kanban_filter(
    tasks: List[Task],
    kanban_filter: Union[KanbanFilter, str],
    now: datetime,
    completion_category: str = DEFAULT_COMPLETION_CATEGORY,
) -> List[Task]:
    """Apply the board's filter selector.

    The due-today and due-this-week views show active tasks only.
    """
    kanban_filter = KanbanFilter(kanban_filter)
    if kanban_filter == KanbanFilter.ALL:
        return list(tasks)
    if kanban_filter == KanbanFilter.ACTIVE:
        return filter_active(tasks, completion_category)
    if kanban_filter == KanbanFilter.COMPLETED:
        return filter_completed(tasks, completion_category)
    if kanban_filter == KanbanFilter.OVERDUE:
        return filter_overdue(tasks, now, completion_category)

    active = filter_active(tasks, completion_category)
    if kanban_filter == KanbanFilter.DUE_TODAY:
        return filter_due_today(active, now)
    return filter_due_this_week(active, now)


def board_summary(tasks: List[Task], context: BoardContext, now: datetime) -> BoardSummary:
    """Compute headline counts. Due counts cover active tasks only."""
    active = filter_active(tasks, context.completion_category)
    return BoardSummary(
        total=len(tasks),
        active=len(active),
        completed=len(tasks) - len(active),
        overdue=len(filter_overdue(active, now, context.completion_category)),
        due_today=len(filter_due_today(active, now)),
        due_this_week=len(filter_due_this_week(active, now)),
    )
