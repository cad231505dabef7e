class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when an operation targets an id that does not exist."""


class InvalidTransitionError(DomainError):
    """Raised when a leave request is moved out of a terminal state."""


class StorageUnavailableError(DomainError):
    """Raised when the key-value backend cannot be read or written."""


class ConcurrentWriteError(StorageUnavailableError):
    """Raised when another writer changed a collection since it was read."""
