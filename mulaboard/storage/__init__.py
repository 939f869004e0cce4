"""Storage layer - PostgreSQL connection pool and schema management."""

from mulaboard.storage.database import Database
from mulaboard.storage.schema import create_tables

__all__ = ["Database", "create_tables"]
