"""Constants for kanbanflow.

This module centralizes fixed default values used throughout the package.
"""

from datetime import datetime


# Completion category
DEFAULT_COMPLETION_CATEGORY_NAME = "Done"
COMPLETION_CATEGORY_SYNONYMS = ("Done", "Completed")
COMPLETION_CATEGORY_COLOR = "#22C55E"

# Import defaults
UNTITLED_TASK_TITLE = "Untitled Task"

# Week boundaries: weeks start on Sunday (Python weekday() numbering, Monday=0)
WEEK_START_WEEKDAY = 6

# Missing date values sort as the Unix epoch
SORT_EPOCH = datetime(1970, 1, 1)
