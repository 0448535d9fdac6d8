from typing import Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Callers pass emails already normalized (see domain.model.user.normalize_email);
    the store compares them verbatim.
    """
    def create(self, user: User) -> User:
        """Persist a new user. Raise DuplicateError if the email is taken."""
        ...

    def save(self, user: User, expected_otp: str | None = None) -> bool:
        """Persist mutations of an existing user by id. Return True if it matched.

        With ``expected_otp`` the write only applies while the stored code still
        equals it, so a code can be consumed at most once.
        """
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...
