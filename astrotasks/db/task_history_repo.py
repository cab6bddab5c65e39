"""Repository for the ``task_history`` table and its stored documents."""

from __future__ import annotations

import logging
from typing import Optional

from astrotasks.db.database import Database, storage_errors
from astrotasks.errors import NotFoundError
from astrotasks.models.task_history import HistoryFile, TaskHistoryRecord
from astrotasks.sniffer import sniff_content_type
from astrotasks.validation import (
    require_all_fields,
    require_company_email,
    require_task_employee_id,
)

logger = logging.getLogger(__name__)

# Metadata projection: the blob itself is never selected here.
_METADATA_COLUMNS = (
    "id, task_name, employee_name, employee_id, email, description, "
    "task_status, allocated_time, upload_doc IS NOT NULL AS has_file"
)


_SQLITE_INT_MIN = -(2**63)
_SQLITE_INT_MAX = 2**63 - 1


def _parse_id(record_id: int | str) -> Optional[int]:
    """Return the integer key, or None when it cannot name a stored row."""
    if isinstance(record_id, int):
        pk = record_id
    else:
        text = str(record_id)
        if not (text.isascii() and text.isdigit()):
            return None
        try:
            pk = int(text)
        except ValueError:
            return None
    # SQLite integers are signed 64-bit.
    if not _SQLITE_INT_MIN <= pk <= _SQLITE_INT_MAX:
        return None
    return pk


class TaskHistoryRepository:
    """Single-Responsibility repository for task-history persistence."""

    def __init__(self, db: Database):
        self._db = db

    # -- Create ----------------------------------------------------------------

    def create_record(
        self,
        record: TaskHistoryRecord,
        upload_doc: Optional[bytes] = None,
    ) -> TaskHistoryRecord:
        """
        Validate and insert ``record`` with an optional document.

        ``upload_doc`` must already have passed the upload stages
        (content-type allow-list and size ceiling); it is stored as-is.
        """
        require_all_fields({
            "taskName": record.task_name,
            "employeeName": record.employee_name,
            "employeeId": record.employee_id,
            "email": record.email,
            "description": record.description,
            "taskStatus": record.task_status,
        })
        require_company_email(record.email)
        require_task_employee_id(record.employee_id)

        logger.info(
            f"Saving task history for {record.employee_id} "
            f"({record.task_status}, has_file={upload_doc is not None})"
        )
        with storage_errors("Failed to save task history"):
            with self._db.transaction() as conn:
                cur = conn.execute(
                    """INSERT INTO task_history
                       (task_name, employee_name, employee_id, email,
                        description, upload_doc, task_status)
                       VALUES (?, ?, ?, ?, ?, ?, ?)""",
                    (
                        record.task_name, record.employee_name, record.employee_id,
                        record.email, record.description, upload_doc,
                        record.task_status,
                    ),
                )
                row = conn.execute(
                    f"SELECT {_METADATA_COLUMNS} FROM task_history WHERE id = ?",
                    (cur.lastrowid,),
                ).fetchone()
        return TaskHistoryRecord.from_row(dict(row))

    # -- Read ------------------------------------------------------------------

    def get_record(self, record_id: int | str) -> TaskHistoryRecord:
        pk = _parse_id(record_id)
        row = None
        if pk is not None:
            with storage_errors("Failed to fetch task history"):
                row = self._db.fetchone(
                    f"SELECT {_METADATA_COLUMNS} FROM task_history WHERE id = ?", (pk,)
                )
        if row is None:
            raise NotFoundError("Task history not found")
        return TaskHistoryRecord.from_row(row)

    def get_file(self, record_id: int | str) -> HistoryFile:
        """Return the stored document; its content type is sniffed, not stored."""
        pk = _parse_id(record_id)
        row = None
        if pk is not None:
            with storage_errors("Failed to retrieve file"):
                row = self._db.fetchone(
                    "SELECT upload_doc, task_name FROM task_history WHERE id = ?", (pk,)
                )
        if row is None or row["upload_doc"] is None:
            raise NotFoundError("File not found")

        content = bytes(row["upload_doc"])
        return HistoryFile(
            content=content,
            filename=row["task_name"],
            content_type=sniff_content_type(content),
        )

    # -- List / Filter ---------------------------------------------------------

    def list_history(self, employee_id: Optional[str] = None) -> list[TaskHistoryRecord]:
        """All history entries, newest first, each flagged with ``has_file``."""
        if employee_id:
            require_task_employee_id(employee_id)
            sql = (
                f"SELECT {_METADATA_COLUMNS} FROM task_history WHERE employee_id = ? "
                "ORDER BY allocated_time DESC, id DESC"
            )
            params: tuple = (employee_id,)
        else:
            sql = f"SELECT {_METADATA_COLUMNS} FROM task_history ORDER BY allocated_time DESC, id DESC"
            params = ()

        with storage_errors("Failed to fetch task history"):
            rows = self._db.fetchall(sql, params)
        return [TaskHistoryRecord.from_row(r) for r in rows]
