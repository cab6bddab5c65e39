"""Task-history domain model — archived task reports with an optional document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class TaskHistoryRecord:
    """Metadata for a history entry. The document blob is never held here."""

    task_name: str
    employee_name: str
    employee_id: str
    email: str
    description: str
    task_status: str
    id: Optional[int] = None
    allocated_time: Optional[str] = None
    has_file: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "task_name": self.task_name,
            "employee_name": self.employee_name,
            "employee_id": self.employee_id,
            "email": self.email,
            "description": self.description,
            "task_status": self.task_status,
            "allocated_time": self.allocated_time,
            "has_file": self.has_file,
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "TaskHistoryRecord":
        return cls(
            id=row["id"],
            task_name=row["task_name"],
            employee_name=row["employee_name"],
            employee_id=row["employee_id"],
            email=row["email"],
            description=row["description"],
            task_status=row["task_status"],
            allocated_time=row.get("allocated_time"),
            has_file=bool(row.get("has_file")),
        )


@dataclass(frozen=True)
class HistoryFile:
    """A stored document ready to be served back."""

    content: bytes
    filename: str
    content_type: str
