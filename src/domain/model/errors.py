"""Domain-level exceptions.

Services raise these errors to express business rule violations.
The API layer maps them to HTTP status codes in one place (api/errors.py).
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist (or is not visible to the caller)."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class ProviderMismatchError(DomainError):
    """Email is bound to a different sign-in method than the one used."""


class InvalidOtpError(DomainError):
    """Submitted code does not match the pending one (or none is pending)."""


class OtpExpiredError(DomainError):
    """Pending code is past its expiry."""


class UnauthorizedError(DomainError):
    """Bearer token missing, malformed, forged or expired."""


class RateLimitedError(DomainError):
    """Caller exceeded the request quota for the current window."""

    def __init__(self, retry_after: int):
        self.retry_after = retry_after
        super().__init__(f"Too many requests. Please try again in {retry_after} seconds.")


class StorageError(DomainError):
    """The persistence layer failed."""


class TokenSigningError(DomainError):
    """A bearer token could not be signed (server misconfiguration)."""
