"""Canonicalization of entity display text into comparison keys.

Every entity kind supplies exactly one canonicalization function; clustering
and scoring are shared across kinds and only see the resulting keys.
"""

from collections.abc import Callable

from shelfmerge.models import EntityKind, EntityRecord, PersonFields
from shelfmerge.normalize._helpers import (
    collapse_whitespace,
    fold_text,
    replace_punctuation,
)

__all__ = [
    "CANONICALIZERS",
    "canonicalize",
    "canonicalize_person",
    "canonicalize_publisher",
    "canonicalize_title",
    "make_entity",
    "parse_person",
    "reorder_inverted_name",
]


def reorder_inverted_name(text: str) -> str:
    """Turn "Last, First[, Suffix]" into "First Last[ Suffix]".

    Text without a comma, or with an empty part before or after the first
    comma, is returned unchanged.

    Parameters
    ----------
    text : str
        Person display text.

    Returns
    -------
    str
        Name in natural order.

    Examples
    --------
        >>> reorder_inverted_name("King, Stephen")
        'Stephen King'
        >>> reorder_inverted_name("Vonnegut, Kurt, Jr.")
        'Kurt Vonnegut Jr.'
    """
    parts = [part.strip() for part in text.split(",")]
    if len(parts) < 2 or not parts[0] or not parts[1]:
        return text
    return " ".join([parts[1], parts[0], *parts[2:]]).strip()


def canonicalize_person(text: str) -> str:
    """Comparison key for a person name.

    Periods and hyphens separate tokens so that dotted initials become
    single-letter tokens ("J.R.R. Tolkien" -> "j r r tolkien").
    """
    text = reorder_inverted_name(text)
    text = fold_text(text)
    text = replace_punctuation(text, " ")
    return collapse_whitespace(text)


def canonicalize_publisher(text: str) -> str:
    """Comparison key for a publisher name ("&" reads as "and")."""
    text = fold_text(text).replace("&", " and ")
    text = replace_punctuation(text, "")
    return collapse_whitespace(text)


def canonicalize_title(text: str) -> str:
    """Comparison key for series, tags and roles."""
    text = fold_text(text)
    text = replace_punctuation(text, "")
    return collapse_whitespace(text)


CANONICALIZERS: dict[EntityKind, Callable[[str], str]] = {
    EntityKind.PERSON: canonicalize_person,
    EntityKind.PUBLISHER: canonicalize_publisher,
    EntityKind.SERIES: canonicalize_title,
    EntityKind.TAG: canonicalize_title,
    EntityKind.ROLE: canonicalize_title,
}


def canonicalize(text: str, kind: EntityKind) -> str:
    """Produce the comparison key for a display text.

    Idempotent: canonicalizing an existing key returns it unchanged.

    Parameters
    ----------
    text : str
        Raw display text (may be empty).
    kind : EntityKind
        Entity kind selecting the canonicalization function.

    Returns
    -------
    str
        Comparison key; empty when no letters or digits remain.
    """
    if not text or not text.strip():
        return ""
    return CANONICALIZERS[kind](text)


def parse_person(key: str) -> PersonFields:
    """Split a person comparison key into name parts.

    Parameters
    ----------
    key : str
        Canonical person key (natural order, space separated).

    Returns
    -------
    PersonFields
        First, middle and last names plus initials.
    """
    tokens = key.split()
    if not tokens:
        return PersonFields(first_name="", middle_names=(), last_name="", initials="")
    return PersonFields(
        first_name=tokens[0],
        middle_names=tuple(tokens[1:-1]),
        last_name=tokens[-1] if len(tokens) > 1 else "",
        initials="".join(token[0] for token in tokens),
    )


def make_entity(kind: EntityKind, entity_id: int, display_text: str) -> EntityRecord:
    """Build an entity record from a stored row.

    Parameters
    ----------
    kind : EntityKind
        Entity kind.
    entity_id : int
        Row id.
    display_text : str
        Stored name or title, kept verbatim.

    Returns
    -------
    EntityRecord
        Record with comparison key and, for persons, name structure.
    """
    display_text = display_text or ""
    key = canonicalize(display_text, kind)
    person = parse_person(key) if kind is EntityKind.PERSON else None
    return EntityRecord(
        kind=kind,
        id=entity_id,
        display_text=display_text,
        canonical_key=key,
        person=person,
    )
