class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "domain_error"


class AuthenticationError(DomainError):
    """Raised when there is no authenticated actor."""

    code = "unauthorized"


class AuthorizationError(DomainError):
    """Raised when a user lacks module access, write permission or church scope."""

    code = "forbidden"


class NotFoundError(DomainError):
    """Raised when a referenced registration, user, member or church does not exist."""

    code = "not_found"


class InvalidTransitionError(DomainError):
    """Raised when a status change is not allowed from the current state (including locked records)."""

    code = "invalid_transition"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"
