"""Library connections and transaction scope."""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from shelfmerge.errors import TransactionError

__all__ = ["open_library", "transaction"]


def open_library(path: Path | str) -> sqlite3.Connection:
    """Open a catalog database.

    The connection runs in autocommit mode; writes are grouped explicitly
    with :func:`transaction`.

    Parameters
    ----------
    path : Path | str
        Database file, or ``":memory:"``.

    Returns
    -------
    sqlite3.Connection
        Connection with foreign keys enforced and ``sqlite3.Row`` rows.
    """
    conn = sqlite3.connect(str(path), isolation_level=None)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Run a block in one write transaction.

    ``BEGIN IMMEDIATE`` takes the write lock up front, so a concurrent
    writer fails here instead of halfway through the block. Any exception
    rolls back; the commit happens only when the block completes.

    Parameters
    ----------
    conn : sqlite3.Connection
        Connection in autocommit mode.

    Yields
    ------
    sqlite3.Connection
        The same connection, inside the transaction.

    Raises
    ------
    TransactionError
        If a transaction is already open or cannot be started or committed.
    """
    if conn.in_transaction:
        raise TransactionError("A transaction is already open on this connection")

    try:
        conn.execute("BEGIN IMMEDIATE")
    except sqlite3.Error as exc:
        raise TransactionError(f"Could not start transaction: {exc}") from exc

    try:
        yield conn
    except BaseException:
        conn.rollback()
        raise

    try:
        conn.commit()
    except sqlite3.Error as exc:
        conn.rollback()
        raise TransactionError(f"Could not commit transaction: {exc}") from exc
