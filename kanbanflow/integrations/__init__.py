"""External collaborators for kanbanflow."""
