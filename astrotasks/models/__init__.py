"""Domain models for employees, tasks and task history."""

from astrotasks.models.employee import Employee
from astrotasks.models.task import Task, DEFAULT_TASK_STATUS, new_task_id
from astrotasks.models.task_history import HistoryFile, TaskHistoryRecord

__all__ = [
    "Employee",
    "Task", "DEFAULT_TASK_STATUS", "new_task_id",
    "TaskHistoryRecord", "HistoryFile",
]
