from dataclasses import dataclass


@dataclass
class User:
    """Domain model representing a user account.

    The password is kept as plaintext; nothing in this service hashes it.
    """
    login: str
    password: str
    email: str | None = None
