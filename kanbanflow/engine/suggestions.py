"""Goal-driven task suggestions for kanbanflow.

Generated candidates are treated like manual entry from an untrusted
source: each one goes through task_from_candidate() so its status and
importance are checked against the taxonomy before it becomes a task.
"""

import logging
from datetime import datetime
from typing import List, Optional

from kanbanflow.engine.completion import is_completion_status
from kanbanflow.integrations.openai_client import OpenAIClient
from kanbanflow.models.context import BoardContext
from kanbanflow.models.errors import BoardValidationError
from kanbanflow.models.task import Task
from kanbanflow.models.task_factory import task_from_candidate

logger = logging.getLogger(__name__)

# Initialize OpenAI client (singleton pattern)
_openai_client: Optional[OpenAIClient] = None


def _get_openai_client() -> OpenAIClient:
    """Get or create OpenAI client instance."""
    global _openai_client
    if _openai_client is None:
        _openai_client = OpenAIClient()
    return _openai_client


def suggest_tasks(
    goal: str,
    context: BoardContext,
    now: Optional[datetime] = None,
    client: Optional[OpenAIClient] = None,
) -> List[Task]:
    """Break a goal into validated tasks.

    Args:
        goal: High-level goal text
        context: Board context (taxonomy and completion category)
        now: Instant used for date and due date offsets
        client: OpenAI client (defaults to the shared instance)

    Returns:
        Tasks ready to add to the board. Malformed candidates are skipped.

    Raises:
        TaskGenerationError: if the collaborator fails
    """
    if not goal or not goal.strip():
        logger.debug("Empty goal provided. Returning no suggestions.")
        return []

    statuses = [
        name for name in context.settings.category_names()
        if not is_completion_status(name, context.completion_category)
    ]
    importances = context.settings.importance_names()

    client = client or _get_openai_client()
    candidates = client.generate_tasks(goal.strip(), statuses, importances)

    tasks: List[Task] = []
    for candidate in candidates:
        try:
            tasks.append(task_from_candidate(candidate, context, now=now))
        except BoardValidationError as e:
            logger.warning(f"Skipping generated task: {e}")
    logger.debug(f"Accepted {len(tasks)} of {len(candidates)} generated tasks")
    return tasks
