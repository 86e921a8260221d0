"""SQLite catalog access: connections, transactions and entity loading."""

from shelfmerge.store.connection import open_library, transaction
from shelfmerge.store.loader import TABLES, existing_ids, load_entities
from shelfmerge.store.schema import SCHEMA_SQL, create_schema

__all__ = [
    "SCHEMA_SQL",
    "TABLES",
    "create_schema",
    "existing_ids",
    "load_entities",
    "open_library",
    "transaction",
]
