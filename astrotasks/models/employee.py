"""Employee domain model — provisioned externally, read-only over HTTP."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class Employee:
    emp_id: str
    name: str
    email: str
    department: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Employee":
        return cls(
            emp_id=row["emp_id"],
            name=row["name"],
            email=row["email"],
            department=row["department"],
        )
