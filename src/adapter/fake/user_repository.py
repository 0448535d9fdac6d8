"""In-memory implementation of UserRepository for testing."""

from dataclasses import replace
from datetime import datetime, timezone

from domain.model.errors import DuplicateError
from domain.model.user import User


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}

    # ── write operations ─────────────────────────────────────

    def create(self, user: User) -> User:
        if any(u.email == user.email for u in self.store.values()):
            raise DuplicateError("Email already exists. Please sign in.")

        self.store[user.id] = replace(user)
        return user

    def save(self, user: User, expected_otp: str | None = None) -> bool:
        stored = self.store.get(user.id)
        if stored is None:
            return False
        if expected_otp is not None and stored.otp != expected_otp:
            return False

        user.updated_at = datetime.now(timezone.utc)
        self.store[user.id] = replace(user)
        return True

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return replace(user)
        return None

    def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return replace(user) if user else None
