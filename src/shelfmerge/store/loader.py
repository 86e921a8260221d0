"""Load entity rows from the catalog."""

import sqlite3

from shelfmerge.models import EntityKind, EntityRecord
from shelfmerge.normalize import make_entity

__all__ = ["TABLES", "load_entities", "existing_ids"]

# Entity kind -> table holding (id, name) rows.
TABLES: dict[EntityKind, str] = {
    EntityKind.PERSON: "people",
    EntityKind.PUBLISHER: "publishers",
    EntityKind.SERIES: "series",
    EntityKind.TAG: "tags",
    EntityKind.ROLE: "roles",
}


def load_entities(conn: sqlite3.Connection, kind: EntityKind) -> list[EntityRecord]:
    """Read and canonicalize every entity of a kind.

    Parameters
    ----------
    conn : sqlite3.Connection
        Library connection.
    kind : EntityKind
        Entity kind to load.

    Returns
    -------
    list[EntityRecord]
        Entities ordered by id.
    """
    table = TABLES[EntityKind(kind)]
    rows = conn.execute(f'SELECT id, name FROM "{table}" ORDER BY id').fetchall()
    return [make_entity(EntityKind(kind), int(row[0]), row[1] or "") for row in rows]


def existing_ids(conn: sqlite3.Connection, table: str, ids: list[int]) -> set[int]:
    """Subset of ``ids`` present in ``table``."""
    if not ids:
        return set()
    placeholders = ",".join("?" for _ in ids)
    return {
        int(row[0])
        for row in conn.execute(f'SELECT id FROM "{table}" WHERE id IN ({placeholders})', ids)
    }
