"""Public API for deduplicating a catalog library.

This module provides the main public API for shelfmerge, enabling:
- Deduplicating one entity kind, or every kind, of an open library
- Merging hand-picked entities
- Writing run reports as JSON
"""

import json
import sqlite3
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from shelfmerge.audit.logger import AuditLogger
from shelfmerge.engine import DeduplicationConfig, run
from shelfmerge.merge import MergeEngine, merge_entities
from shelfmerge.models import DeduplicationResult, EntityKind
from shelfmerge.reporting import Reporter
from shelfmerge.store import load_entities
from shelfmerge.utils import get_iso_timestamp

__all__ = [
    "KIND_ORDER",
    "deduplicate",
    "deduplicate_all",
    "merge_entities",
    "build_report",
    "write_report",
]

KIND_ORDER: tuple[EntityKind, ...] = (
    EntityKind.PERSON,
    EntityKind.PUBLISHER,
    EntityKind.SERIES,
    EntityKind.TAG,
    EntityKind.ROLE,
)


def deduplicate(
    conn: sqlite3.Connection,
    kind: EntityKind | str,
    config: DeduplicationConfig | None = None,
    *,
    reporter: Reporter | None = None,
    logger: AuditLogger | None = None,
) -> DeduplicationResult:
    """Find, and optionally merge, duplicates of one entity kind.

    Parameters
    ----------
    conn : sqlite3.Connection
        Library connection (see ``shelfmerge.store.open_library``).
    kind : EntityKind | str
        Entity kind ("person", "publisher", "series", "tag", "role").
    config : DeduplicationConfig | None, optional
        Run configuration. If None, uses the kind's defaults, which are a
        dry run.
    reporter : Reporter | None, optional
        Receiver for status, progress and non-fatal errors.
    logger : AuditLogger | None, optional
        Audit logger for group events.

    Returns
    -------
    DeduplicationResult
        Report of the run.

    Raises
    ------
    ValidationError
        If the kind or the configuration is invalid.

    Examples
    --------
    Preview duplicate people:

        >>> from shelfmerge import deduplicate, open_library
        >>> conn = open_library("library.db")
        >>> result = deduplicate(conn, "person")
        >>> for group in result.duplicate_groups:
        ...     print(group.primary_display_text, group.duplicate_display_texts)
    """
    kind = EntityKind(kind)
    if config is None:
        config = DeduplicationConfig.for_kind(kind)

    if logger:
        logger.set_kind(kind)

    entities = load_entities(conn, kind)
    merger = MergeEngine(conn, kind) if config.merges_enabled else None
    return run(entities, config, kind=kind, merger=merger, reporter=reporter, logger=logger)


def deduplicate_all(
    conn: sqlite3.Connection,
    *,
    reporter: Reporter | None = None,
    logger: AuditLogger | None = None,
    **overrides: Any,
) -> dict[EntityKind, DeduplicationResult]:
    """Deduplicate every entity kind in ``KIND_ORDER``.

    Parameters
    ----------
    conn : sqlite3.Connection
        Library connection.
    reporter : Reporter | None, optional
        Receiver for status, progress and non-fatal errors.
    logger : AuditLogger | None, optional
        Audit logger for group events.
    **overrides : Any
        ``DeduplicationConfig`` fields applied to every kind; unset fields
        keep the per-kind defaults.

    Returns
    -------
    dict[EntityKind, DeduplicationResult]
        One result per kind, in processing order.
    """
    results: dict[EntityKind, DeduplicationResult] = {}
    for kind in KIND_ORDER:
        config = DeduplicationConfig.for_kind(kind, **overrides)
        results[kind] = deduplicate(conn, kind, config, reporter=reporter, logger=logger)
    return results


def build_report(
    results: Sequence[DeduplicationResult],
    run_id: str | None = None,
) -> dict[str, Any]:
    """Assemble a JSON-serializable report of one or more runs."""
    return {
        "run_id": run_id,
        "generated_at": get_iso_timestamp(),
        "results": [result.to_dict() for result in results],
    }


def write_report(
    results: Sequence[DeduplicationResult],
    path: str | Path,
    *,
    run_id: str | None = None,
) -> None:
    """Write a run report as indented JSON.

    Parameters
    ----------
    results : Sequence[DeduplicationResult]
        Results to report.
    path : str | Path
        Output file path.
    run_id : str | None, optional
        Run identifier shared with the audit log.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with file_path.open("w", encoding="utf-8", newline="\n") as f:
        json.dump(build_report(results, run_id), f, indent=2, ensure_ascii=False, sort_keys=True)
        f.write("\n")
