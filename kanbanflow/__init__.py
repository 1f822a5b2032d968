"""kanbanflow: taxonomy-driven task board model and view engine."""

__version__ = "0.1.0"
