"""In-memory implementation of UserRepository.

State lives only as long as the owning application context; nothing is
shared between processes.
"""

from domain.model.user import User

# Account available right after startup.
DEFAULT_USERS = (
    User(login='nikita', password='123'),
)


class InMemoryUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}

    # ── write operations ─────────────────────────────────────

    def set(self, login: str, user: User) -> None:
        self.store[login] = user

    # ── read operations ──────────────────────────────────────

    def has(self, login: str) -> bool:
        return login in self.store

    def get(self, login: str) -> User | None:
        return self.store.get(login)

    def count(self) -> int:
        return len(self.store)


def seed_default_users(repo) -> None:
    """Insert DEFAULT_USERS into repo, skipping logins already present."""
    for user in DEFAULT_USERS:
        if not repo.has(user.login):
            repo.set(user.login, User(login=user.login, password=user.password, email=user.email))
