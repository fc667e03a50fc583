class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when sign-in or sign-up is rejected by the backend."""


class BackendError(DomainError):
    """Raised when a call to the hosted backend fails."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message


class ConfigurationError(Exception):
    """Raised at startup when required settings are missing."""
