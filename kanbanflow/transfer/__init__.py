"""Bulk import, export and normalization for kanbanflow boards."""

from kanbanflow.transfer.normalize import NormalizedData, normalize, find_duplicate_ids
from kanbanflow.transfer.export import export_data, import_data, dumps, loads, clear_all

__all__ = [
    "NormalizedData",
    "normalize",
    "find_duplicate_ids",
    "export_data",
    "import_data",
    "dumps",
    "loads",
    "clear_all",
]
