"""Audit logging subsystem.

Main Components
---------------
- AuditLogger: JSONL event logger
- LogEvent: one structured event
"""

from shelfmerge.audit.helpers import generate_run_id, get_package_version
from shelfmerge.audit.logger import AuditLogger
from shelfmerge.audit.models import LogEvent

__all__ = [
    "AuditLogger",
    "LogEvent",
    "generate_run_id",
    "get_package_version",
]
