"""Registry of every column that references an entity kind.

The merge engine rewrites exactly these columns; a reference missing here
would leave dangling rows after a merge, so new referencing tables must be
registered.
"""

import re
from dataclasses import dataclass

from shelfmerge.models import EntityKind

__all__ = ["Reference", "REFERENCES", "check_identifier"]

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def check_identifier(name: str) -> str:
    """Return ``name`` if it is a plain SQL identifier, else raise ValueError."""
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return name


@dataclass(frozen=True, slots=True)
class Reference:
    """One column pointing at an entity table.

    Attributes
    ----------
    table : str
        Referencing table.
    column : str
        Column holding the entity id.
    peer_columns : tuple[str, ...]
        For junction tables, the other columns of the row's identity. Two
        rows equal on these columns collapse into one when their entity ids
        are merged. Empty for plain foreign-key columns.
    """

    table: str
    column: str
    peer_columns: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate identifiers."""
        for name in (self.table, self.column, *self.peer_columns):
            check_identifier(name)

    @property
    def is_junction(self) -> bool:
        """Whether rows can collapse after a rewrite."""
        return bool(self.peer_columns)


REFERENCES: dict[EntityKind, tuple[Reference, ...]] = {
    EntityKind.PERSON: (
        Reference("x_books_people_roles", "person_id", ("book_id", "role_id")),
        Reference("x_contents_people_roles", "person_id", ("content_id", "role_id")),
    ),
    EntityKind.PUBLISHER: (Reference("books", "publisher_id"),),
    EntityKind.SERIES: (Reference("books", "series_id"),),
    EntityKind.TAG: (
        Reference("x_books_tags", "tag_id", ("book_id",)),
        Reference("x_contents_tags", "tag_id", ("content_id",)),
    ),
    EntityKind.ROLE: (
        Reference("x_books_people_roles", "role_id", ("book_id", "person_id")),
        Reference("x_contents_people_roles", "role_id", ("content_id", "person_id")),
    ),
}
