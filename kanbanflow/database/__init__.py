"""Persistence adapter for kanbanflow boards."""
