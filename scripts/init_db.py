#!/usr/bin/env python3
"""Initialize the database and optionally seed employees from a YAML file."""

from __future__ import annotations

import argparse
import sqlite3
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from astrotasks.config import get_settings
from astrotasks.db.database import Database
from astrotasks.db.employee_repo import EmployeeRepository
from astrotasks.db.schema import SchemaInitializer
from astrotasks.errors import StartupError
from astrotasks.models.employee import Employee
from astrotasks.validation import is_valid_employee_id


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Initialize the database")
    parser.add_argument("--seed-employees", type=str, help="YAML file with employee definitions")
    parser.add_argument("--db-path", type=str, help="Override database path")
    args = parser.parse_args(argv)

    settings = get_settings()
    db = Database(Path(args.db_path) if args.db_path else settings.database_path)
    try:
        SchemaInitializer(
            db,
            max_attempts=settings.DB_INIT_RETRIES,
            delay=settings.DB_INIT_RETRY_DELAY,
        ).run()
    except StartupError as e:
        print(f"Error: {e}", file=sys.stderr)
        db.close()
        return 1
    print(f"Database initialized at: {db.path}")

    if args.seed_employees:
        seed_employees(db, Path(args.seed_employees))

    db.close()
    print("Done.")
    return 0


def seed_employees(db: Database, path: Path) -> int:
    """Insert employees listed under ``employees:``; returns how many were created."""
    import yaml
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    repo = EmployeeRepository(db)
    created = 0
    for e in data.get("employees", []):
        emp_id = e.get("emp_id", "")
        if not is_valid_employee_id(emp_id):
            print(f"  Skipping {emp_id or '?'}: invalid employee ID")
            continue
        try:
            repo.create(Employee(
                emp_id=emp_id,
                name=e["name"],
                email=e["email"],
                department=e["department"],
            ))
        except (KeyError, sqlite3.IntegrityError) as exc:
            print(f"  Skipping {emp_id}: {exc!r}")
            continue
        created += 1
        print(f"  Created employee: {emp_id} ({e['name']})")
    return created


if __name__ == "__main__":
    sys.exit(main())
