from typing import Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for the user directory."""
    def has(self, login: str) -> bool:
        """Return True if an account is registered under login."""
        ...

    def get(self, login: str) -> User | None:
        """Find a user by login. Return User or None if not found."""
        ...

    def set(self, login: str, user: User) -> None:
        """Store user under login, replacing any previous record."""
        ...

    def count(self) -> int:
        """Return the number of stored accounts."""
        ...
