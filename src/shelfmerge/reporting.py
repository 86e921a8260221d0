"""Progress and error reporting seam.

The orchestrator never prints or logs on its own; it talks to a
``Reporter``. Front ends supply their own (the CLI echoes through click,
the audit log records structured events).
"""

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from shelfmerge.audit.logger import AuditLogger

__all__ = ["Reporter", "SilentReporter", "CompositeReporter", "AuditReporter"]


@runtime_checkable
class Reporter(Protocol):
    """Receiver for status messages, progress and non-fatal errors."""

    def status(self, message: str) -> None:
        """Report a status message."""
        ...

    def progress(self, current: int, total: int) -> None:
        """Report that ``current`` of ``total`` units are done."""
        ...

    def error(self, message: str) -> None:
        """Report a non-fatal error."""
        ...


class SilentReporter:
    """Reporter that discards everything."""

    def status(self, message: str) -> None:
        """Discard status."""

    def progress(self, current: int, total: int) -> None:
        """Discard progress."""

    def error(self, message: str) -> None:
        """Discard error."""


class CompositeReporter:
    """Fan out every report to several reporters, in order."""

    def __init__(self, reporters: Iterable[Reporter]) -> None:
        """Initialize with the reporters to forward to."""
        self.reporters = list(reporters)

    def status(self, message: str) -> None:
        """Forward status."""
        for reporter in self.reporters:
            reporter.status(message)

    def progress(self, current: int, total: int) -> None:
        """Forward progress."""
        for reporter in self.reporters:
            reporter.progress(current, total)

    def error(self, message: str) -> None:
        """Forward error."""
        for reporter in self.reporters:
            reporter.error(message)


class AuditReporter:
    """Record reports as audit log events.

    Progress is only written when it completes a unit of work, so a long
    run does not flood the log.

    Parameters
    ----------
    logger : AuditLogger
        Open audit logger.
    """

    def __init__(self, logger: AuditLogger) -> None:
        """Initialize with an open audit logger."""
        self.logger = logger

    def status(self, message: str) -> None:
        """Log a status event."""
        self.logger.event("status", data={"message": message})

    def progress(self, current: int, total: int) -> None:
        """Log progress when ``current`` reaches ``total``."""
        if current >= total:
            self.logger.event("progress", data={"current": current, "total": total})

    def error(self, message: str) -> None:
        """Log a non-fatal error event."""
        self.logger.event("reported_error", data={"message": message}, level="WARN")
