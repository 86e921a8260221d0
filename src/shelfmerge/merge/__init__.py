"""Transactional entity merge."""

from shelfmerge.merge.engine import MergeEngine, merge_entities
from shelfmerge.merge.references import REFERENCES, Reference

__all__ = ["REFERENCES", "MergeEngine", "Reference", "merge_entities"]
