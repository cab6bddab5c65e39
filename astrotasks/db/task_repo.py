"""Repository for the ``tasks`` table. Append-only from the API's view."""

from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from astrotasks.db.database import Database, storage_errors
from astrotasks.errors import ConflictError, NotFoundError
from astrotasks.models.task import DEFAULT_TASK_STATUS, Task
from astrotasks.validation import (
    require_all_fields,
    require_company_email,
    require_iso_date,
    require_task_employee_id,
)

logger = logging.getLogger(__name__)


class TaskRepository:
    """Single-Responsibility repository for task persistence."""

    def __init__(self, db: Database):
        self._db = db

    # -- Create ----------------------------------------------------------------

    def create_task(self, task: Task) -> Task:
        """
        Validate and insert ``task``, returning the stored row.

        The primary key is the only uniqueness guarantee for the
        timestamp-derived ``id``; a collision raises ``ConflictError``.
        """
        require_all_fields({
            "taskName": task.task_name,
            "employeeName": task.employee_name,
            "employeeId": task.employee_id,
            "email": task.email,
            "taskDescription": task.task_description,
            "allocatedDate": task.allocated_date,
            "deadline": task.deadline,
        })
        require_company_email(task.email)
        require_task_employee_id(task.employee_id)
        allocated_date = require_iso_date(task.allocated_date, "allocatedDate")
        deadline = require_iso_date(task.deadline, "deadline")

        with storage_errors("Failed to save task"):
            try:
                with self._db.transaction() as conn:
                    conn.execute(
                        """INSERT INTO tasks
                           (id, task_name, employee_name, employee_id, email,
                            task_description, allocated_date, deadline, status)
                           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                        (
                            task.id, task.task_name, task.employee_name,
                            task.employee_id, task.email, task.task_description,
                            allocated_date, deadline,
                            task.status or DEFAULT_TASK_STATUS,
                        ),
                    )
                    row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task.id,)).fetchone()
            except sqlite3.IntegrityError as e:
                logger.warning(f"Task id collision on {task.id}: {e}")
                raise ConflictError("Task id already exists, please retry") from e

        logger.info(f"Created task {task.id} for {task.employee_id}")
        return Task.from_row(dict(row))

    # -- Read ------------------------------------------------------------------

    def get_task(self, task_id: str) -> Task:
        with storage_errors("Failed to fetch task"):
            row = self._db.fetchone("SELECT * FROM tasks WHERE id = ?", (task_id,))
        if row is None:
            raise NotFoundError("Task not found")
        return Task.from_row(row)

    # -- List / Filter ---------------------------------------------------------

    def list_tasks(self, employee_id: Optional[str] = None) -> list[Task]:
        """All tasks, newest first, optionally restricted to one employee."""
        if employee_id:
            require_task_employee_id(employee_id)
            sql = "SELECT * FROM tasks WHERE employee_id = ? ORDER BY created_at DESC, id DESC"
            params: tuple = (employee_id,)
        else:
            sql = "SELECT * FROM tasks ORDER BY created_at DESC, id DESC"
            params = ()

        with storage_errors("Failed to fetch tasks"):
            rows = self._db.fetchall(sql, params)
        return [Task.from_row(r) for r in rows]
