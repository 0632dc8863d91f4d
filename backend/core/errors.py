"""Error kinds raised by the booking core and its storage adapters.

The DRF exception handler in ``core.exceptions`` turns each of these into an
HTTP response, so views and services simply let them propagate.
"""


class BookingCoreError(Exception):
    """Base class for every error the core reports to its callers."""

    default_message = "Internal error"

    def __init__(self, message: str | None = None, *, details: str | None = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class RandomSourceUnavailable(BookingCoreError):
    """The secure random byte source could not produce bytes."""

    default_message = "Failed to generate booking ID"


class IdentifierSpaceExhausted(BookingCoreError):
    """No unused identifier was found within the allowed number of attempts."""

    default_message = (
        "Could not generate unique booking ID after multiple attempts. "
        "Please try again later."
    )

    def __init__(self, message: str | None = None, *, attempts: int = 0, **kwargs):
        self.attempts = attempts
        super().__init__(message, **kwargs)


class NotFound(BookingCoreError):
    default_message = "Not found"


class Conflict(BookingCoreError):
    """A record with the same natural key (e.g. username) already exists."""

    default_message = "Already exists"


class StorageError(BookingCoreError):
    """Any failure of the underlying store: connection, query, transaction."""

    default_message = "Database error"


class UniqueConstraintViolation(StorageError):
    """An insert collided with a unique index or constraint."""

    default_message = "Duplicate key"
