class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when the referenced user does not exist."""


class NotificationError(DomainError):
    """Raised when a notification could not be delivered."""
