"""OpenAI API integration for kanbanflow.

This module provides task generation: breaking a high-level goal into
candidate board tasks. Candidates are untrusted and must go through
task_from_candidate() before they become real tasks.
"""

import os
import json
import logging
from typing import List, Optional, Sequence

from openai import OpenAI, APIError
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# OpenAI model to use for task generation
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

# Task generation prompt template
GENERATE_TASKS_PROMPT_TEMPLATE = """You are an expert project manager. A user wants to achieve a high-level goal and needs it broken down into smaller, actionable tasks for a Kanban board.

User's goal: "{goal}"

Based on this goal, generate a list of tasks.

- For the "status" of each task, you MUST use one of the following available statuses: {statuses}
- For the "importance" of each task, you SHOULD use one of the following available importance levels where appropriate: {importances}
- Provide a reasonable estimate for "daysFromNow" for the due date.

Respond with a JSON object of the form:
{{"tasks": [{{"taskid": "Short descriptive title", "desc": "What needs to be done", "status": "...", "importance": "...", "daysFromNow": 7}}]}}

Respond only with the JSON object, no other text."""


class TaskGenerationError(Exception):
    """Recoverable failure of the text-generation collaborator."""


def _strip_code_fences(content: str) -> str:
    """Remove markdown code fences the model sometimes wraps JSON in."""
    if content.startswith("```json"):
        content = content[7:]
    if content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    return content.strip()


class OpenAIClient:
    """Client for OpenAI API integration."""

    def __init__(self, api_key: Optional[str] = None):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key. If None, reads from OPENAI_API_KEY environment variable.

        Note:
            If no key is available the client still initializes; generate_tasks()
            then raises TaskGenerationError.
        """
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.client = None

        if self.api_key:
            self.client = OpenAI(api_key=self.api_key)
        else:
            logger.warning("OPENAI_API_KEY not found in environment. Task generation will not be available.")

    def generate_tasks(
        self,
        goal: str,
        available_statuses: Sequence[str],
        available_importances: Sequence[str],
    ) -> List[dict]:
        """Ask the model to break a goal into candidate tasks.

        Args:
            goal: High-level goal to break down
            available_statuses: Workflow category names the model may use
            available_importances: Importance level names the model may use

        Returns:
            List of raw candidate dicts (taskid, desc, status, importance, daysFromNow).
            Values are not checked against the taxonomy here.

        Raises:
            TaskGenerationError: if the client is not configured, the API call
                fails, or the response is not the expected JSON shape
        """
        if not self.client:
            raise TaskGenerationError("OpenAI client not configured (missing OPENAI_API_KEY)")

        prompt = GENERATE_TASKS_PROMPT_TEMPLATE.format(
            goal=goal,
            statuses=json.dumps(list(available_statuses)),
            importances=json.dumps(list(available_importances)),
        )

        try:
            response = self.client.chat.completions.create(
                model=OPENAI_MODEL,
                messages=[
                    {"role": "system", "content": "You are a project planning assistant. Respond only with valid JSON."},
                    {"role": "user", "content": prompt}
                ],
                temperature=0.4,
                max_tokens=1500,
            )
        except APIError as e:
            error_code = getattr(e, 'code', None)
            status_code = getattr(e, 'status_code', None)

            if error_code == 'insufficient_quota':
                logger.warning("OpenAI API quota insufficient. Please check billing/payment method in OpenAI dashboard.")
            elif status_code == 429:
                logger.warning("OpenAI API rate limit exceeded. Please wait before retrying.")
            else:
                logger.error(f"OpenAI API error: {status_code or 'unknown'} ({error_code or 'unknown'})")

            # Don't log full error message as it might contain sensitive info
            raise TaskGenerationError(f"OpenAI API error: {status_code or 'unknown'}") from e
        except Exception as e:
            logger.error(f"Error calling OpenAI API: {type(e).__name__}")
            raise TaskGenerationError(f"Error calling OpenAI API: {type(e).__name__}") from e

        content = _strip_code_fences((response.choices[0].message.content or "").strip())

        try:
            result = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse OpenAI JSON response: {e}. Response: {content[:100]}")
            raise TaskGenerationError("OpenAI returned malformed JSON") from e

        tasks = result.get("tasks") if isinstance(result, dict) else None
        if not isinstance(tasks, list):
            logger.warning(f"OpenAI response missing 'tasks' list. Response: {content[:100]}")
            raise TaskGenerationError("OpenAI response missing 'tasks' list")

        candidates = [item for item in tasks if isinstance(item, dict)]
        logger.debug(f"OpenAI generated {len(candidates)} candidate tasks")
        return candidates
