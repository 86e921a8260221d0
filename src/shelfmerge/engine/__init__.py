"""Deduplication orchestration engine.

This package provides the main entry point for one deduplication run,
including configuration and primary selection.
"""

from shelfmerge.engine.config import (
    DEFAULT_MIN_CONFIDENCE,
    DEFAULT_MIN_FREQUENCY,
    DeduplicationConfig,
)
from shelfmerge.engine.primary import select_primary
from shelfmerge.engine.runner import Merger, evaluate_cluster, run

__all__ = [
    "DEFAULT_MIN_CONFIDENCE",
    "DEFAULT_MIN_FREQUENCY",
    "DeduplicationConfig",
    "Merger",
    "evaluate_cluster",
    "run",
    "select_primary",
]
