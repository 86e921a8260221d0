"""Transactional merge of duplicate entities into a primary.

One merge is one transaction: every reference to a duplicate is rewritten
to the primary, junction rows that would repeat are collapsed, and the
duplicate rows are deleted. Either all of it lands or none of it does.
"""

import sqlite3
from collections.abc import Sequence

from shelfmerge.errors import MergeError, NotFoundError, TransactionError
from shelfmerge.merge.references import REFERENCES, Reference, check_identifier
from shelfmerge.models import EntityKind, MergeStats
from shelfmerge.store import TABLES, existing_ids, transaction

__all__ = ["MergeEngine", "merge_entities"]


def _validate_request(primary_id: int, duplicate_ids: Sequence[int]) -> tuple[int, ...]:
    """Check the request shape; return duplicates without repeats, in order."""
    unique = tuple(dict.fromkeys(int(i) for i in duplicate_ids))
    if not unique:
        raise MergeError("No duplicate ids given")
    if primary_id in unique:
        raise MergeError(f"Primary {primary_id} cannot also be a duplicate")
    return unique


class MergeEngine:
    """Merge entities of one kind inside a library.

    Parameters
    ----------
    conn : sqlite3.Connection
        Library connection in autocommit mode (see ``open_library``).
    kind : EntityKind
        Entity kind handled by this engine.
    """

    def __init__(self, conn: sqlite3.Connection, kind: EntityKind) -> None:
        """Initialize engine for one kind."""
        self.conn = conn
        self.kind = EntityKind(kind)
        self.table = check_identifier(TABLES[self.kind])
        self.references: tuple[Reference, ...] = REFERENCES[self.kind]

    def merge(self, primary_id: int, duplicate_ids: Sequence[int]) -> MergeStats:
        """Fold ``duplicate_ids`` into ``primary_id`` atomically.

        Parameters
        ----------
        primary_id : int
            Surviving entity.
        duplicate_ids : Sequence[int]
            Entities to eliminate.

        Returns
        -------
        MergeStats
            Rewritten and collapsed row counts per referencing table.

        Raises
        ------
        MergeError
            If no duplicates are given or the primary is among them.
        NotFoundError
            If any id no longer exists; nothing is changed.
        TransactionError
            If the store fails; the transaction is rolled back.
        """
        primary_id = int(primary_id)
        duplicates = _validate_request(primary_id, duplicate_ids)

        try:
            with transaction(self.conn):
                self._check_exist(primary_id, duplicates)
                updated, collapsed = self._rewrite_references(primary_id, duplicates)
                self._delete_entities(duplicates)
        except sqlite3.Error as exc:
            raise TransactionError(
                f"Merging {self.kind} {list(duplicates)} into {primary_id} failed: {exc}"
            ) from exc

        return MergeStats(
            kind=self.kind,
            primary_id=primary_id,
            merged_ids=duplicates,
            rows_updated_by_table=updated,
            rows_collapsed_by_table=collapsed,
        )

    def _check_exist(self, primary_id: int, duplicates: tuple[int, ...]) -> None:
        wanted = [primary_id, *duplicates]
        missing = set(wanted) - existing_ids(self.conn, self.table, wanted)
        if missing:
            raise NotFoundError(
                f"{self.kind} ids not found: {sorted(missing)}",
                missing_ids=missing,
            )

    def _rewrite_references(
        self,
        primary_id: int,
        duplicates: tuple[int, ...],
    ) -> tuple[dict[str, int], dict[str, int]]:
        updated: dict[str, int] = {}
        collapsed: dict[str, int] = {}

        for ref in self.references:
            updated.setdefault(ref.table, 0)
            if ref.is_junction:
                collapsed.setdefault(ref.table, 0)

            # Sequential: a later duplicate collapses against rows an earlier
            # one already moved onto the primary.
            for duplicate_id in duplicates:
                if ref.is_junction:
                    collapsed[ref.table] += self._collapse_junction(ref, primary_id, duplicate_id)
                cursor = self.conn.execute(
                    f'UPDATE "{ref.table}" SET "{ref.column}" = ? WHERE "{ref.column}" = ?',
                    (primary_id, duplicate_id),
                )
                updated[ref.table] += cursor.rowcount

        return updated, collapsed

    def _collapse_junction(self, ref: Reference, primary_id: int, duplicate_id: int) -> int:
        """Delete duplicate rows whose rewritten form already exists."""
        same_peers = " AND ".join(
            f'keep."{col}" = "{ref.table}"."{col}"' for col in ref.peer_columns
        )
        cursor = self.conn.execute(
            f'DELETE FROM "{ref.table}" WHERE "{ref.column}" = ? AND EXISTS ('
            f'SELECT 1 FROM "{ref.table}" AS keep '
            f'WHERE keep."{ref.column}" = ? AND {same_peers})',
            (duplicate_id, primary_id),
        )
        return cursor.rowcount

    def _delete_entities(self, duplicates: tuple[int, ...]) -> None:
        placeholders = ",".join("?" for _ in duplicates)
        self.conn.execute(
            f'DELETE FROM "{self.table}" WHERE id IN ({placeholders})',
            duplicates,
        )


def merge_entities(
    conn: sqlite3.Connection,
    kind: EntityKind,
    primary_id: int,
    duplicate_ids: Sequence[int],
) -> MergeStats:
    """Merge ``duplicate_ids`` into ``primary_id`` in one transaction.

    Shorthand for ``MergeEngine(conn, kind).merge(primary_id, duplicate_ids)``.
    """
    return MergeEngine(conn, kind).merge(primary_id, duplicate_ids)
