class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class IneligibleWindow(DomainError):
    """Raised when a check-in falls outside the schedule's allowed interval."""


class NoCheckInFound(DomainError):
    """Raised when checking out without a check-in for the same day."""


class UnknownPerson(DomainError):
    """Raised when a person reference does not resolve."""


class UnknownCourse(DomainError):
    """Raised when a course reference does not resolve."""


class NotEnrolled(DomainError):
    """Raised when a person is not enrolled in the course they check in to."""


class RecordNotFound(DomainError):
    """Raised when an attendance record id does not exist."""


class ConcurrencyConflict(DomainError):
    """Transient write conflict on the per-day key.

    Retried inside the reconciler, never surfaced to callers.
    """


class StorageUnavailable(Exception):
    """Persistence failed or timed out. Safe to retry; no partial write was made."""


class AuthenticationError(DomainError):
    """Raised when the upstream gateway did not identify the caller."""


class AuthorizationError(DomainError):
    """Raised when the caller may not act on someone else's request."""


class RequestNotFound(DomainError):
    """Raised when a permission request id does not exist."""
