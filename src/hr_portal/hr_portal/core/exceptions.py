class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is malformed."""


class PolicyViolationError(DomainError):
    """Raised when a well-formed request breaks a business rule."""


class AlreadyCheckedInError(PolicyViolationError):
    """Raised when the user already has an attendance record for the day."""


class AlreadyCheckedOutError(PolicyViolationError):
    """Raised when the attendance record is already closed."""


class ConflictError(PolicyViolationError):
    """Raised when a unique resource (e.g. an email) already exists."""


class AuthenticationError(DomainError):
    """Raised when credentials or tokens are missing or invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class UpstreamError(DomainError):
    """Raised when the backing store call fails."""
