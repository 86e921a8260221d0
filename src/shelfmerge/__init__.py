"""Duplicate detection and transactional merge for personal book catalogs.

This package provides:
- Data models (shelfmerge.models): entity and report types
- Normalization (shelfmerge.normalize): comparison keys per entity kind
- Clustering (shelfmerge.clustering): similarity edges and Union-Find
- Scoring (shelfmerge.scoring): variant patterns and confidence
- Engine (shelfmerge.engine): run orchestration and configuration
- Merge (shelfmerge.merge): atomic reference rewriting
- Store (shelfmerge.store): SQLite catalog access
- Audit (shelfmerge.audit): JSONL event log
- CLI (shelfmerge.cli): command-line interface
- Public API (shelfmerge.api): high-level convenience functions
"""

__version__ = "0.1.0"

from shelfmerge.api import deduplicate, deduplicate_all, merge_entities, write_report
from shelfmerge.engine import DeduplicationConfig, run
from shelfmerge.errors import (
    DataIntegrityError,
    DedupeError,
    MergeError,
    NotFoundError,
    TransactionError,
    ValidationError,
)
from shelfmerge.models import DeduplicationResult, EntityKind, EntityRecord, MergeStats
from shelfmerge.normalize import canonicalize, make_entity
from shelfmerge.store import open_library

__all__ = [
    "__version__",
    "DataIntegrityError",
    "DedupeError",
    "DeduplicationConfig",
    "DeduplicationResult",
    "EntityKind",
    "EntityRecord",
    "MergeError",
    "MergeStats",
    "NotFoundError",
    "TransactionError",
    "ValidationError",
    "canonicalize",
    "deduplicate",
    "deduplicate_all",
    "make_entity",
    "merge_entities",
    "open_library",
    "run",
    "write_report",
]
