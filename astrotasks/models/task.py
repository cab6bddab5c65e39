"""Task domain model — an assignment owned by one employee."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Optional

DEFAULT_TASK_STATUS = "assigned"


def new_task_id() -> str:
    """Millisecond wall-clock token. Uniqueness is enforced by the primary key."""
    return str(time.time_ns() // 1_000_000)


@dataclass
class Task:
    task_name: str
    employee_name: str
    employee_id: str
    email: str
    task_description: str
    allocated_date: str
    deadline: str
    status: str = DEFAULT_TASK_STATUS
    id: str = field(default_factory=new_task_id)
    created_at: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "task_name": self.task_name,
            "employee_name": self.employee_name,
            "employee_id": self.employee_id,
            "email": self.email,
            "task_description": self.task_description,
            "allocated_date": self.allocated_date,
            "deadline": self.deadline,
            "status": self.status,
            "created_at": self.created_at,
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Task":
        return cls(
            id=row["id"],
            task_name=row["task_name"],
            employee_name=row["employee_name"],
            employee_id=row["employee_id"],
            email=row["email"],
            task_description=row["task_description"],
            allocated_date=row["allocated_date"],
            deadline=row["deadline"],
            status=row.get("status") or DEFAULT_TASK_STATUS,
            created_at=row.get("created_at"),
        )
