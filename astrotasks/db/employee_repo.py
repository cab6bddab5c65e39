"""Repository for the ``employees`` table."""

from __future__ import annotations

from astrotasks.db.database import Database, storage_errors
from astrotasks.errors import NotFoundError
from astrotasks.models.employee import Employee
from astrotasks.validation import require_lookup_employee_id


class EmployeeRepository:
    def __init__(self, db: Database):
        self._db = db

    def create(self, employee: Employee) -> Employee:
        """Insert a provisioned employee. Raises ``sqlite3.IntegrityError`` on duplicate ID."""
        with self._db.transaction() as conn:
            conn.execute(
                "INSERT INTO employees (emp_id, name, email, department) VALUES (?, ?, ?, ?)",
                (employee.emp_id, employee.name, employee.email, employee.department),
            )
        return employee

    def get_employee(self, emp_id: str) -> Employee:
        require_lookup_employee_id(emp_id)
        with storage_errors("Failed to fetch employee"):
            row = self._db.fetchone("SELECT * FROM employees WHERE emp_id = ?", (emp_id,))
        if row is None:
            raise NotFoundError("Employee not found")
        return Employee.from_row(row)
