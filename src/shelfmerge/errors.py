"""Exception hierarchy for deduplication and merge.

Errors fall in two classes:

- Per-group failures (``MergeError`` and subclasses) are isolated by the
  orchestrator and collected in ``DeduplicationResult.failed_groups``.
- Defects (``DataIntegrityError``) and bad input (``ValidationError``)
  abort the whole run.
"""

from collections.abc import Iterable

__all__ = [
    "DedupeError",
    "ValidationError",
    "DataIntegrityError",
    "MergeError",
    "NotFoundError",
    "TransactionError",
]


class DedupeError(Exception):
    """Base class for all shelfmerge errors."""


class ValidationError(DedupeError, ValueError):
    """Raised when configuration or run input is malformed."""


class DataIntegrityError(DedupeError):
    """Raised when clustering or scoring produced an invalid state."""


class MergeError(DedupeError):
    """Raised when a merge request cannot be applied."""


class NotFoundError(MergeError):
    """Raised when ids referenced by a merge no longer exist.

    Attributes
    ----------
    missing_ids : tuple[int, ...]
        Ids that were not found, sorted.
    """

    def __init__(self, message: str, missing_ids: Iterable[int] = ()) -> None:
        """Initialize not-found error.

        Parameters
        ----------
        message : str
            Error message.
        missing_ids : Iterable[int], optional
            Ids that were not found.
        """
        super().__init__(message)
        self.missing_ids = tuple(sorted(missing_ids))


class TransactionError(MergeError):
    """Raised when the store fails to write or commit a merge."""
