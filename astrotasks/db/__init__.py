"""Database layer — pooled SQLite storage handle and repositories."""

from astrotasks.db.database import Database, storage_errors
from astrotasks.db.schema import SCHEMA_DDL, SchemaInitializer, SchemaState

__all__ = ["Database", "storage_errors", "SCHEMA_DDL", "SchemaInitializer", "SchemaState"]
