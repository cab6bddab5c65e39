"""Database schema DDL and the startup schema initializer."""

from __future__ import annotations

import logging
import sqlite3
import time
from enum import Enum
from typing import TYPE_CHECKING, Callable

from astrotasks.errors import StartupError, StorageError

if TYPE_CHECKING:
    from astrotasks.db.database import Database

logger = logging.getLogger(__name__)

SCHEMA_DDL = """
-- ==========================================================================
-- Employees (provisioned externally)
-- ==========================================================================
CREATE TABLE IF NOT EXISTS employees (
    emp_id      VARCHAR(7) PRIMARY KEY,
    name        VARCHAR(100) NOT NULL,
    email       VARCHAR(100) NOT NULL,
    department  VARCHAR(100) NOT NULL
);

-- ==========================================================================
-- Tasks
-- ==========================================================================
CREATE TABLE IF NOT EXISTS tasks (
    id                  VARCHAR(255) PRIMARY KEY,
    task_name           VARCHAR(100) NOT NULL,
    employee_name       VARCHAR(100) NOT NULL,
    employee_id         VARCHAR(7) NOT NULL,
    email               VARCHAR(100) NOT NULL,
    task_description    TEXT NOT NULL,
    allocated_date      DATE NOT NULL,
    deadline            DATE NOT NULL,
    status              VARCHAR(20) NOT NULL DEFAULT 'assigned',
    created_at          TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_tasks_employee_id ON tasks(employee_id);
CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status);

-- ==========================================================================
-- Task history (optional attached document)
-- ==========================================================================
CREATE TABLE IF NOT EXISTS task_history (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    task_name       VARCHAR(100) NOT NULL,
    employee_name   VARCHAR(100) NOT NULL,
    employee_id     VARCHAR(7) NOT NULL,
    email           VARCHAR(100) NOT NULL,
    description     TEXT NOT NULL,
    upload_doc      BLOB,
    task_status     VARCHAR(20) NOT NULL,
    allocated_time  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_task_history_employee_id ON task_history(employee_id);
CREATE INDEX IF NOT EXISTS idx_task_history_task_status ON task_history(task_status);
"""


class SchemaState(str, Enum):
    UNINITIALIZED = "uninitialized"
    RETRYING = "retrying"
    READY = "ready"
    FAILED = "failed"


class SchemaInitializer:
    """Apply ``SCHEMA_DDL`` at startup, retrying with a fixed delay."""

    def __init__(
        self,
        db: Database,
        max_attempts: int = 5,
        delay: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._db = db
        self.max_attempts = max(1, max_attempts)
        self.delay = delay
        self._sleep = sleep
        self.state = SchemaState.UNINITIALIZED
        self.attempts = 0

    @property
    def ready(self) -> bool:
        return self.state is SchemaState.READY

    def run(self) -> None:
        """Block until the schema exists. Raises ``StartupError`` when attempts run out."""
        if self.ready:
            return

        for attempt in range(1, self.max_attempts + 1):
            self.attempts = attempt
            try:
                self._db.init()
            except (sqlite3.Error, OSError, StorageError) as e:
                logger.warning(f"Attempt {attempt} - error initializing database: {e}")
                if attempt == self.max_attempts:
                    break
                self.state = SchemaState.RETRYING
                logger.info(f"Retrying in {self.delay:g} seconds...")
                self._sleep(self.delay)
            else:
                self.state = SchemaState.READY
                logger.info(f"Database tables initialized at {self._db.path}")
                return

        self.state = SchemaState.FAILED
        raise StartupError(
            f"Failed to initialize database after {self.max_attempts} attempts"
        )
