"""
Storage layer: SQLite persistence for depictions.

Components:
    - DatabaseHelper: Owns the connection, creates the schema, hands out handles
    - StoreHandle: Readable or writable session with query/insert/update
      and an explicit or scoped transaction envelope
    - table: Table name, column names and the CREATE statement

Database Schema:
    depictions: _id, name, description, entity_id, last_used, times_used

The database is stored at .depictions/depictions.db relative to the project root.
"""

from depictions.core.storage.database import MEMORY, DatabaseHelper, get_default_db_path
from depictions.core.storage.handle import StoreHandle
from depictions.core.storage.table import ALL_FIELDS, COLUMN_ID, TABLE_NAME

__all__ = [
    "DatabaseHelper",
    "StoreHandle",
    "get_default_db_path",
    "MEMORY",
    "ALL_FIELDS",
    "COLUMN_ID",
    "TABLE_NAME",
]
