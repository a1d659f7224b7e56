"""Exceptions raised by the Tally core."""


class TallyError(Exception):
    """Base exception for Tally errors."""


class ValidationError(TallyError, ValueError):
    """Raised when input fails validation (empty name, duplicate, bad amount)."""


class NotFoundError(TallyError, LookupError):
    """Raised when an id or name has no live record."""


class PersistenceError(TallyError):
    """Raised when the database rejects a write. State is left unchanged."""


class NeedsConfirmation(TallyError):
    """Raised when a permanent delete would also remove expenses.

    Not a failure: the caller is expected to confirm and call again with
    ``confirmed=True``. Nothing has been changed when this is raised.
    """

    def __init__(self, category_name: str, dependent_count: int):
        self.category_name = category_name
        self.dependent_count = dependent_count
        super().__init__(
            f"Deleting category '{category_name}' will also delete "
            f"{dependent_count} associated expense(s)"
        )
