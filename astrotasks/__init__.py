"""AstroTasks: task assignment and task-document tracking service."""

__version__ = "1.0.0"
