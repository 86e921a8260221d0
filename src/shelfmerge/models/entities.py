"""Entity records as loaded from the catalog."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

__all__ = ["EntityKind", "PersonFields", "EntityRecord"]


class EntityKind(StrEnum):
    """Kinds of catalog entity that can be deduplicated.

    Attributes
    ----------
    PERSON : str
        Authors, translators, illustrators (``people`` table).
    PUBLISHER : str
        Publishing houses (``publishers`` table).
    SERIES : str
        Book series (``series`` table).
    TAG : str
        Free-form tags (``tags`` table).
    ROLE : str
        Contributor roles (``roles`` table).
    """

    PERSON = "person"
    PUBLISHER = "publisher"
    SERIES = "series"
    TAG = "tag"
    ROLE = "role"


@dataclass(frozen=True, slots=True)
class PersonFields:
    """Structural decomposition of a person's comparison key.

    Attributes
    ----------
    first_name : str
        First token of the key, empty for an empty key.
    middle_names : tuple[str, ...]
        Tokens between first and last name.
    last_name : str
        Last token of the key; empty for single-token names.
    initials : str
        First letter of each token, in order.
    """

    first_name: str
    middle_names: tuple[str, ...]
    last_name: str
    initials: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "first_name": self.first_name,
            "middle_names": list(self.middle_names),
            "last_name": self.last_name,
            "initials": self.initials,
        }


@dataclass(frozen=True, slots=True)
class EntityRecord:
    """A stored entity prepared for comparison.

    Read-only for clustering and scoring. ``display_text`` is the stored
    value and is never rewritten; ``canonical_key`` is only used for
    matching.

    Attributes
    ----------
    kind : EntityKind
        Entity kind.
    id : int
        Stable row identifier.
    display_text : str
        Raw stored name or title.
    canonical_key : str
        Comparison key; empty when the display text has no usable content.
    person : PersonFields | None
        Name structure, set for persons only.
    """

    kind: EntityKind
    id: int
    display_text: str
    canonical_key: str
    person: PersonFields | None = None

    @property
    def tokens(self) -> tuple[str, ...]:
        """Whitespace-separated tokens of the comparison key."""
        return tuple(self.canonical_key.split())

    @property
    def is_abbreviated(self) -> bool:
        """Whether the key contains a one-letter (initial) token."""
        return any(len(token) == 1 for token in self.tokens)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "id": self.id,
            "display_text": self.display_text,
            "canonical_key": self.canonical_key,
            "person": self.person.to_dict() if self.person else None,
        }
