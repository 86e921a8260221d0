"""Canonicalization of display text into comparison keys."""

from shelfmerge.normalize._helpers import strip_accents
from shelfmerge.normalize.canonicalizer import (
    canonicalize,
    make_entity,
    parse_person,
    reorder_inverted_name,
)

__all__ = [
    "canonicalize",
    "make_entity",
    "parse_person",
    "reorder_inverted_name",
    "strip_accents",
]
