"""Tests for goal-driven task suggestions."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from kanbanflow.engine.suggestions import suggest_tasks
from kanbanflow.integrations.openai_client import TaskGenerationError


@pytest.fixture
def generator():
    return MagicMock()


def test_candidates_become_tasks(generator, context, now) -> None:
    generator.generate_tasks.return_value = [
        {"taskid": "Draft agenda", "desc": "Outline sessions", "status": "Not Started",
         "importance": "High", "daysFromNow": 2},
        {"taskid": "Book venue", "status": "In Progress", "importance": "Low", "daysFromNow": 5.6},
    ]

    tasks = suggest_tasks("Plan offsite", context, now=now, client=generator)

    assert [task.title for task in tasks] == ["Draft agenda", "Book venue"]
    assert tasks[0].due_date == now + timedelta(days=2)
    assert tasks[1].due_date == now + timedelta(days=6)
    assert all(task.completion_date is None for task in tasks)


def test_completion_category_not_offered(generator, context, now) -> None:
    generator.generate_tasks.return_value = []
    suggest_tasks("Plan offsite", context, now=now, client=generator)

    goal, statuses, importances = generator.generate_tasks.call_args.args
    assert goal == "Plan offsite"
    assert statuses == ["Not Started", "In Progress"]
    assert importances == ["High", "Low"]


def test_out_of_taxonomy_values_fall_back(generator, context, now) -> None:
    generator.generate_tasks.return_value = [
        {"taskid": "Ship it", "status": "Done", "importance": "Critical", "daysFromNow": 1},
    ]
    task = suggest_tasks("Launch", context, now=now, client=generator)[0]
    assert task.status == "Not Started"
    assert task.importance == "Low"
    assert task.completion_date is None


def test_malformed_candidates_skipped(generator, context, now) -> None:
    generator.generate_tasks.return_value = [
        {"status": "Not Started"},
        {"taskid": "Valid", "daysFromNow": "later"},
        {"taskid": "Kept"},
    ]
    tasks = suggest_tasks("Goal", context, now=now, client=generator)
    assert [task.title for task in tasks] == ["Kept"]


def test_empty_goal_skips_generation(generator, context, now) -> None:
    assert suggest_tasks("   ", context, now=now, client=generator) == []
    generator.generate_tasks.assert_not_called()


def test_generation_failure_propagates(generator, context, now) -> None:
    generator.generate_tasks.side_effect = TaskGenerationError("OpenAI API error: 429")
    with pytest.raises(TaskGenerationError):
        suggest_tasks("Goal", context, now=now, client=generator)
