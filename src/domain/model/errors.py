"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Each carries the HTTP status the API answers with; route handlers either
respond directly or let the error reach the centralized error handler.
"""


class DomainError(Exception):
    """Base class for all domain errors."""

    status = 500


class ValidationError(DomainError):
    """Input is missing required fields."""

    status = 400


class ConflictError(DomainError):
    """Entity with the same unique key already exists."""

    status = 409


class AuthenticationError(DomainError):
    """Credentials could not be verified."""

    status = 401


class UserNotFoundError(AuthenticationError):
    """No account is registered under the given login."""

    def __init__(self, login: str, message: str = "Неверный логин или пароль"):
        self.login = login
        super().__init__(message)


class InvalidPasswordError(AuthenticationError):
    """Account exists but the supplied password does not match."""

    def __init__(self, login: str, message: str = "Неверный логин или пароль"):
        self.login = login
        super().__init__(message)


class InternalError(DomainError):
    """Unexpected failure inside the service.

    Wraps the original exception (kept as ``__cause__``); status is 500
    unless the original carried its own.
    """

    def __init__(self, message: str, status: int = 500):
        self.status = status
        super().__init__(message)
