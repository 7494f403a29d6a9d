class DomainError(Exception):
    """Base class for errors the API reports back to the caller as JSON."""


class ValidationError(DomainError):
    """Bad input: malformed numbers, out-of-range percentages, unknown choices."""


class ConflictError(ValidationError):
    """The request is well formed but clashes with stored state (duplicate fee, fee already paid)."""


class NotFoundError(DomainError):
    """No policy, payment, fee structure or attendance record under that id."""


class AuthorizationError(DomainError):
    """The signed-in role may not manage attendance policies."""
