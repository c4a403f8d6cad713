class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class DuplicateEntryError(DomainError):
    """Raised when a unique key (user id, card UID, ...) already exists."""


class ReferenceNotFoundError(DomainError):
    """Raised when a row references a parent that does not exist."""
