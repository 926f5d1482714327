"""
Domain Error Taxonomy

Every failure raised by the domain layer belongs to one of these kinds.
The API exception handler maps each kind onto an HTTP status code.
"""


class DomainError(Exception):
    """Base class for all domain failures."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    """Malformed or incomplete input."""

    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(DomainError):
    """Missing, invalid or expired credential."""

    status_code = 401
    default_message = "Unauthorized"


class AuthorizationError(DomainError):
    """Authenticated, but the role or scope does not allow the action."""

    status_code = 403
    default_message = "Forbidden"


class NotFoundError(DomainError):
    status_code = 404
    default_message = "Not found"


class ConflictError(DomainError):
    """The write would break a uniqueness or non-overlap rule."""

    status_code = 409
    default_message = "Conflict"


class DependencyError(DomainError):
    """Storage or an upstream service failed."""

    status_code = 500
    default_message = "Internal server error"
