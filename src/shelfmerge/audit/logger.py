"""Structured audit logger for JSONL event logging.

Provides append-only structured event logging to JSONL files with
a persistent file handle for efficient I/O.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from shelfmerge.audit.helpers import get_package_version
from shelfmerge.audit.models import LOG_LEVELS, LogEvent
from shelfmerge.models import DuplicateGroup, FailedGroup, MergeStats
from shelfmerge.utils import get_iso_timestamp

__all__ = ["AuditLogger"]


class AuditLogger:
    """JSONL audit logger with persistent file handle.

    Writes structured log events to a JSONL file (one JSON object per line).
    Events are append-only and flushed after each write, so a crashed run
    still leaves every merge it committed on record.

    Attributes
    ----------
    run_id : str
        Unique run identifier.
    log_path : Path
        Path to JSONL log file.
    current_kind : str | None
        Entity kind attached to events that do not name one.
    """

    def __init__(self, run_id: str, log_path: Path) -> None:
        """Initialize audit logger and open file handle.

        Parameters
        ----------
        run_id : str
            Unique run identifier.
        log_path : Path
            Path to JSONL log file.
        """
        self.run_id = run_id
        self.log_path = Path(log_path)
        self.current_kind: str | None = None

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.log_path.open("a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and close file."""
        self.close()

    def close(self) -> None:
        """Flush and close the log file handle."""
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def set_kind(self, kind: str | None) -> None:
        """Set the entity kind context for subsequent events."""
        self.current_kind = str(kind) if kind is not None else None

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        kind: str | None = None,
        entity_id: int | None = None,
    ) -> None:
        """Write structured event to log.

        Parameters
        ----------
        event_type : str
            Event type identifier (e.g., "group_merged").
        data : dict[str, Any] | None, optional
            Event-specific data payload.
        level : str, optional
            Log level ("DEBUG", "INFO", "WARN", "ERROR").
        kind : str | None, optional
            Entity kind, uses current_kind if not provided.
        entity_id : int | None, optional
            Entity identifier if event is entity-specific.

        Raises
        ------
        ValueError
            If level is not a known log level.
        """
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {level!r}")

        log_event = LogEvent(
            ts=get_iso_timestamp(),
            run_id=self.run_id,
            level=level,
            event=event_type,
            data=data if data is not None else {},
            kind=str(kind) if kind is not None else self.current_kind,
            entity_id=entity_id,
        )

        self._write_event(log_event)

    def _write_event(self, event: LogEvent) -> None:
        """Write event to JSONL file and flush."""
        json.dump(asdict(event), self._file, ensure_ascii=False, separators=(",", ":"))
        self._file.write("\n")
        self._file.flush()

    def run_started(self, command: list[str], parameters: dict[str, Any]) -> None:
        """Log run_started event, stamped with the installed shelfmerge version.

        Parameters
        ----------
        command : list[str]
            Command-line arguments.
        parameters : dict[str, Any]
            Configuration parameters.
        """
        self.event(
            "run_started",
            data={
                "command": command,
                "parameters": parameters,
                "version": get_package_version(),
            },
        )

    def run_finished(
        self,
        status: str,
        duration_seconds: float,
        entities_processed: int | None = None,
    ) -> None:
        """Log run_finished event.

        Parameters
        ----------
        status : str
            Run status ("success", "failed", "partial").
        duration_seconds : float
            Total execution time in seconds.
        entities_processed : int | None, optional
            Total entities considered.
        """
        data: dict[str, Any] = {
            "status": status,
            "duration_seconds": duration_seconds,
        }
        if entities_processed is not None:
            data["entities_processed"] = entities_processed

        self.event("run_finished", data=data)

    def group_found(self, group: DuplicateGroup) -> None:
        """Log a duplicate group accepted by the filters."""
        self.event(
            "group_found",
            data={
                "duplicate_ids": list(group.duplicate_ids),
                "confidence": group.confidence,
                "edge_count": group.edge_count,
            },
            kind=group.kind,
            entity_id=group.primary_id,
        )

    def group_merged(self, stats: MergeStats) -> None:
        """Log a committed merge."""
        self.event(
            "group_merged",
            data={
                "merged_ids": list(stats.merged_ids),
                "rows_updated_by_table": dict(stats.rows_updated_by_table),
                "rows_collapsed_by_table": dict(stats.rows_collapsed_by_table),
            },
            kind=stats.kind,
            entity_id=stats.primary_id,
        )

    def group_failed(self, failed: FailedGroup) -> None:
        """Log a merge that was rolled back."""
        self.event(
            "group_failed",
            data={
                "duplicate_ids": list(failed.group.duplicate_ids),
                "error_type": failed.error_type,
                "reason": failed.reason,
            },
            level="WARN",
            kind=failed.group.kind,
            entity_id=failed.group.primary_id,
        )

    def error(
        self,
        exception_class: str,
        message: str,
        kind: str | None = None,
        entity_id: int | None = None,
    ) -> None:
        """Log error event.

        Parameters
        ----------
        exception_class : str
            Exception class name.
        message : str
            Error message.
        kind : str | None, optional
            Entity kind where the error occurred.
        entity_id : int | None, optional
            Entity identifier if the error is entity-specific.
        """
        self.event(
            "error",
            data={"exception_class": exception_class, "message": message},
            level="ERROR",
            kind=kind,
            entity_id=entity_id,
        )
