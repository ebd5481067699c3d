"""Domain error types."""


class DomainError(Exception):
    """Base domain error."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(DomainError):
    """Resource not found."""
    def __init__(self, resource: str, identifier: str = ""):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found")


class ValidationError(DomainError):
    """Missing or malformed input."""


class AuthenticationError(DomainError):
    """Missing, invalid or expired credentials."""
    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class AuthorizationError(DomainError):
    """Authenticated but not allowed (blocked user, private profile, not a participant)."""
    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)


class ConflictError(DomainError):
    """Resource conflict error (duplicate request, already joined, duplicate email)."""
