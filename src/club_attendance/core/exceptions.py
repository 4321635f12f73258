class DomainError(Exception):
    """Base exception for business rule violations."""


class PreconditionError(DomainError):
    """Raised when required submission fields are missing or malformed."""


class NotFoundError(DomainError):
    """Raised when an activity, participant or attendance record does not exist."""


class StoreConflictError(DomainError):
    """Raised when a concurrent write on the same attendance key could not be resolved."""
