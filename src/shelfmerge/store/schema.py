"""Catalog schema: entity tables and the tables that reference them.

Only the columns the deduplication core reads or rewrites are defined;
real libraries may carry more columns, which are left untouched.
"""

import sqlite3

__all__ = ["SCHEMA_SQL", "create_schema"]

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS "people" (
    "id" INTEGER PRIMARY KEY AUTOINCREMENT,
    "name" TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS "publishers" (
    "id" INTEGER PRIMARY KEY AUTOINCREMENT,
    "name" TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS "series" (
    "id" INTEGER PRIMARY KEY AUTOINCREMENT,
    "name" TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS "tags" (
    "id" INTEGER PRIMARY KEY AUTOINCREMENT,
    "name" TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS "roles" (
    "id" INTEGER PRIMARY KEY AUTOINCREMENT,
    "name" TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS "books" (
    "id" INTEGER PRIMARY KEY AUTOINCREMENT,
    "name" TEXT NOT NULL,
    "publisher_id" INTEGER,
    "series_id" INTEGER,
    FOREIGN KEY("publisher_id") REFERENCES "publishers"("id") ON DELETE SET NULL,
    FOREIGN KEY("series_id") REFERENCES "series"("id") ON DELETE SET NULL
);

CREATE TABLE IF NOT EXISTS "contents" (
    "id" INTEGER PRIMARY KEY AUTOINCREMENT,
    "name" TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS "x_books_people_roles" (
    "book_id" INTEGER NOT NULL,
    "person_id" INTEGER NOT NULL,
    "role_id" INTEGER NOT NULL,
    PRIMARY KEY("book_id", "person_id", "role_id"),
    FOREIGN KEY("book_id") REFERENCES "books"("id") ON DELETE CASCADE,
    FOREIGN KEY("person_id") REFERENCES "people"("id") ON DELETE CASCADE,
    FOREIGN KEY("role_id") REFERENCES "roles"("id") ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS "x_contents_people_roles" (
    "content_id" INTEGER NOT NULL,
    "person_id" INTEGER NOT NULL,
    "role_id" INTEGER NOT NULL,
    PRIMARY KEY("content_id", "person_id", "role_id"),
    FOREIGN KEY("content_id") REFERENCES "contents"("id") ON DELETE CASCADE,
    FOREIGN KEY("person_id") REFERENCES "people"("id") ON DELETE CASCADE,
    FOREIGN KEY("role_id") REFERENCES "roles"("id") ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS "x_books_tags" (
    "book_id" INTEGER NOT NULL,
    "tag_id" INTEGER NOT NULL,
    PRIMARY KEY("book_id", "tag_id"),
    FOREIGN KEY("book_id") REFERENCES "books"("id") ON DELETE CASCADE,
    FOREIGN KEY("tag_id") REFERENCES "tags"("id") ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS "x_contents_tags" (
    "content_id" INTEGER NOT NULL,
    "tag_id" INTEGER NOT NULL,
    PRIMARY KEY("content_id", "tag_id"),
    FOREIGN KEY("content_id") REFERENCES "contents"("id") ON DELETE CASCADE,
    FOREIGN KEY("tag_id") REFERENCES "tags"("id") ON DELETE CASCADE
);
"""


def create_schema(conn: sqlite3.Connection) -> None:
    """Create any missing catalog tables.

    Parameters
    ----------
    conn : sqlite3.Connection
        Open library connection.
    """
    conn.executescript(SCHEMA_SQL)
