"""Auth service — registration and authentication business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP responses.

Passwords are stored and compared as plaintext. This mirrors the stub's
observed behavior; a real deployment must hash them before storing.
"""

import logging
import secrets

from domain.model.errors import ConflictError, InvalidPasswordError, UserNotFoundError, ValidationError
from domain.model.user import User
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

INVALID_DATA_MESSAGE = "Неправильные данные"
CREDENTIALS_REQUIRED_MESSAGE = "Логин и пароль обязательны"
DUPLICATE_LOGIN_MESSAGE = "Пользователь уже существует"


def _passwords_match(stored: str, supplied: str) -> bool:
    return secrets.compare_digest(stored.encode("utf-8"), supplied.encode("utf-8"))


def register(repo: UserRepository, login: str | None, password: str | None, email: str | None = None) -> User:
    """Register a new user.

    Returns the created User domain object.

    Raises:
        ValidationError: login or password missing
        ConflictError: login already registered
    """
    if not login or not password:
        raise ValidationError(INVALID_DATA_MESSAGE)

    if repo.has(login):
        raise ConflictError(DUPLICATE_LOGIN_MESSAGE)

    user = User(login=login, password=password, email=email)
    repo.set(login, user)
    return user


def authenticate(repo: UserRepository, login: str | None, password: str | None) -> User:
    """Check login and password against the directory.

    Returns the matching User domain object. Both failure kinds carry the
    same message so callers cannot tell which part was wrong.

    Raises:
        ValidationError: login or password missing
        UserNotFoundError: no account under login
        InvalidPasswordError: password does not match
    """
    if not login or not password:
        raise ValidationError(CREDENTIALS_REQUIRED_MESSAGE)

    user = repo.get(login)
    if user is None:
        raise UserNotFoundError(login)

    if not _passwords_match(user.password, password):
        logger.info("Password mismatch", extra={"login": login})
        raise InvalidPasswordError(login)

    return user
