"""Pytest configuration and fixtures for test suite."""

import sqlite3
import sys
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from shelfmerge.models import EntityKind, EntityRecord  # noqa: E402
from shelfmerge.normalize import make_entity  # noqa: E402
from shelfmerge.store import create_schema, open_library  # noqa: E402

# Small catalog with known duplicates. Expected groups at the default
# similarity threshold (0.85):
#   people      2 <- [1, 3]  (confidence ~0.867)   6 <- [7]  (~0.987)
#   publishers  2 <- [1]                            4 <- [3]
#   series      2 <- [1]     (~0.876)
#   tags        1 <- [2, 6]                         3 <- [4]
#   roles       1 <- [2]     (~0.922)
SEED_SQL = """
INSERT INTO people (id, name) VALUES
    (1, 'Stephen King'),
    (2, 'Stephen Edwin King'),
    (3, 'King, Stephen'),
    (4, 'Italo Calvino'),
    (5, 'Umberto Eco'),
    (6, 'Margaret Atwood'),
    (7, 'Margaret Atwod');

INSERT INTO publishers (id, name) VALUES
    (1, 'HarperCollins'),
    (2, 'Harper Collins'),
    (3, 'Simon & Schuster'),
    (4, 'Simon and Schuster'),
    (5, 'Penguin Books');

INSERT INTO series (id, name) VALUES
    (1, 'Harry Potter'),
    (2, 'Harry Potter Series'),
    (3, 'The Dark Tower');

INSERT INTO tags (id, name) VALUES
    (1, 'Fantasy'),
    (2, 'fantasy'),
    (3, 'Horror'),
    (4, 'horror'),
    (5, 'Science Fiction'),
    (6, 'FANTASY');

INSERT INTO roles (id, name) VALUES
    (1, 'Autore'),
    (2, 'Author'),
    (3, 'Traduttore'),
    (4, 'Translator');

INSERT INTO books (id, name, publisher_id, series_id) VALUES
    (1, 'The Shining', 1, NULL),
    (2, 'It', 2, NULL),
    (3, 'The Stand', 4, NULL),
    (4, 'The Handmaid''s Tale', 3, NULL),
    (5, 'Harry Potter and the Philosopher''s Stone', 5, 1),
    (6, 'Harry Potter and the Chamber of Secrets', 5, 2);

INSERT INTO contents (id, name) VALUES
    (1, 'The Shining'),
    (2, 'Oryx and Crake');

INSERT INTO x_books_people_roles (book_id, person_id, role_id) VALUES
    (1, 1, 1),
    (1, 3, 1),
    (2, 2, 2),
    (3, 3, 1),
    (4, 6, 2),
    (4, 7, 1);

INSERT INTO x_contents_people_roles (content_id, person_id, role_id) VALUES
    (1, 1, 1),
    (1, 2, 1),
    (2, 7, 3);

INSERT INTO x_books_tags (book_id, tag_id) VALUES
    (1, 3),
    (1, 4),
    (2, 4),
    (4, 5),
    (5, 1),
    (5, 2),
    (6, 2);

INSERT INTO x_contents_tags (content_id, tag_id) VALUES
    (1, 3),
    (1, 4),
    (2, 5);
"""


def seed_library(conn: sqlite3.Connection) -> None:
    """Create the catalog schema and insert the seed rows."""
    create_schema(conn)
    conn.executescript(SEED_SQL)


def snapshot(conn: sqlite3.Connection) -> dict[str, list[tuple]]:
    """Every row of every table, in a stable order."""
    tables = [
        row[0]
        for row in conn.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' "
            "AND name NOT LIKE 'sqlite_%' ORDER BY name"
        )
    ]
    return {
        table: sorted(tuple(row) for row in conn.execute(f'SELECT * FROM "{table}"'))
        for table in tables
    }


@pytest.fixture
def library() -> Iterator[sqlite3.Connection]:
    """In-memory seeded catalog."""
    conn = open_library(":memory:")
    seed_library(conn)
    yield conn
    conn.close()


@pytest.fixture
def library_path(tmp_path: Path) -> Path:
    """Seeded catalog on disk, for CLI tests."""
    path = tmp_path / "library.db"
    conn = open_library(path)
    seed_library(conn)
    conn.close()
    return path


@pytest.fixture
def make_entities() -> Callable[..., list[EntityRecord]]:
    """Factory turning ``{id: display_text}`` into canonical entities."""

    def _factory(
        names: Mapping[int, str],
        kind: EntityKind = EntityKind.PERSON,
    ) -> list[EntityRecord]:
        return [make_entity(kind, entity_id, text) for entity_id, text in names.items()]

    return _factory


@pytest.fixture
def take_snapshot() -> Callable[[sqlite3.Connection], dict[str, list[tuple]]]:
    """Function capturing every row of every table."""
    return snapshot
