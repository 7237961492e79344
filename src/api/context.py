"""Application context: per-app ownership of settings and the user directory."""

from dataclasses import dataclass

from adapter.memory.user_repository import InMemoryUserRepository, seed_default_users
from api.config import Settings
from port.user_repository import UserRepository


@dataclass
class AppContext:
    settings: Settings
    user_repo: UserRepository


def build_context(settings: Settings, user_repo: UserRepository | None = None) -> AppContext:
    """Create the context for one application instance.

    A fresh in-memory directory seeded with the default account is used
    unless user_repo is supplied.
    """
    if user_repo is None:
        user_repo = InMemoryUserRepository()
        seed_default_users(user_repo)
    return AppContext(settings=settings, user_repo=user_repo)
